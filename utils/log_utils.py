from rich.console import Console

console = Console()

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}

class AppLogger:
    def __init__(self, config, console=console):
        self.config = config
        self.console = console

    def _enabled(self, level):
        configured = _LEVELS.get(self.config.logging.level.upper(), 20)
        return _LEVELS[level] >= configured

    def info(self, message):
        if self._enabled("INFO"):
            self.console.print(message)

    def warning(self, message):
        if self._enabled("WARNING"):
            self.console.print(f"⚠️  [yellow]WARNING:[/] {message}")

    def error(self, message):
        self.console.print(f"❌ [bold red]ERROR:[/] {message}")

    def success(self, message):
        if self._enabled("INFO"):
            self.console.print(f"✅ [green]SUCCESS:[/] {message}")

    def debug(self, message):
        if self._enabled("DEBUG"):
            self.console.print(f"⚙️  [dim]DEBUG:[/dim] {message}")
