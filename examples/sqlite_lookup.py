import sqlite3

import q_fallback as qf


def build_db() -> sqlite3.Connection:
    conn = sqlite3.connect(":memory:")
    conn.execute(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, role TEXT, active INTEGER)"
    )
    conn.executemany(
        "INSERT INTO users (id, name, role, active) VALUES (?, ?, ?, ?)",
        [
            (1, "ada", "owner", 1),
            (2, "bob", "admin", 0),
            (3, "cy", "member", 1),
            (4, "dee", "owner", 1),
        ],
    )
    return conn


users = qf.SqliteSource(build_db(), "users", order_by="id")

# No active admin exists, so the first owner is returned instead.
active_admin_or_owner = qf.FirstOrFallback(
    qf.parse("role == 'admin' and active == true"),
    qf.parse("role == 'owner'"),
)

if __name__ == "__main__":
    lookup = active_admin_or_owner(users)
    print(users.last_sql, users.last_params)
    print(lookup.matched, lookup.element)
