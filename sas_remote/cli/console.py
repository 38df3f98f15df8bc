from rich.console import Console

# One console for log records, progress lines and results so they never interleave
console = Console()
