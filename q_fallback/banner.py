from rich.console import Console

console = Console()


def banner(version: str):
    console.print(
        r"""
[bold cyan]
░▄▀▄░░░░░█▀▀░█▀█░█░░░█░░░█▀▄░█▀█░█▀▀░█░█
░█\█░▄▄▄░█▀▀░█▀█░█░░░█░░░█▀▄░█▀█░█░░░█▀▄
░░▀\░░░░░▀░░░▀░▀░▀▀▀░▀▀▀░▀▀░░▀░▀░▀▀▀░▀░▀
[/bold cyan]
"""
    )
    console.print(f"[bright_white]v{version}[/bright_white]")
    console.print()
