import yaml
import os
from dataclasses import dataclass
from typing import Dict, Any, Tuple
from rich.console import Console

console = Console()

@dataclass
class DisplayConfig:
    window_width: int
    window_height: int
    toolbar_height: int
    fps: int

@dataclass
class EditorConfig:
    zoom_step: float
    pan_step: float
    default_template: str
    clear_color: Tuple[int, int, int]

@dataclass
class PathsConfig:
    projects_file: str
    export_dir: str

@dataclass
class LoggingConfig:
    level: str

@dataclass
class Config:
    display: DisplayConfig
    editor: EditorConfig
    paths: PathsConfig
    logging: LoggingConfig

class ConfigManager:
    """Manages loading and accessing configuration from YAML file."""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = config_path
        self.config = None
        self.load_config()

    def load_config(self):
        """Load configuration from YAML file, falling back to defaults."""
        try:
            if not os.path.exists(self.config_path):
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as file:
                yaml_data = yaml.safe_load(file)

            self.config = self._parse_config(yaml_data or {})
            console.log(f"Configuration loaded from '{self.config_path}'")

        except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError) as e:
            console.log(f"[yellow]Could not load configuration: {e}. Using defaults.[/yellow]")
            self.config = self._get_default_config()

    def _parse_config(self, yaml_data: Dict[str, Any]) -> Config:
        """Parse YAML data into structured configuration objects.

        Missing sections keep their default values; present sections must
        be complete.
        """
        defaults = self._get_default_config()

        editor = defaults.editor
        if 'editor' in yaml_data:
            editor_data = dict(yaml_data['editor'])
            editor_data['clear_color'] = tuple(editor_data['clear_color'])
            editor = EditorConfig(**editor_data)
            if editor.zoom_step <= 0:
                raise ValueError("editor.zoom_step must be positive")

        return Config(
            display=DisplayConfig(**yaml_data['display']) if 'display' in yaml_data else defaults.display,
            editor=editor,
            paths=PathsConfig(**yaml_data['paths']) if 'paths' in yaml_data else defaults.paths,
            logging=LoggingConfig(**yaml_data.get('logging', {'level': 'INFO'})),
        )

    def _get_default_config(self) -> Config:
        """Return the built-in configuration."""
        return Config(
            display=DisplayConfig(1280, 720, 40, 60),
            editor=EditorConfig(0.1, 32, "platformer", (31, 41, 55)),
            paths=PathsConfig("projects.json", "out"),
            logging=LoggingConfig(level="INFO"),
        )

    def get_config(self) -> Config:
        """Get the current configuration."""
        return self.config

    def reload_config(self):
        """Reload configuration from file."""
        console.log("Reloading configuration...")
        self.load_config()

# Created on first use so importing this module never touches the disk.
config_manager = None

def get_config(config_path: str = "config.yaml") -> Config:
    """Get the global configuration instance."""
    global config_manager
    if config_manager is None or config_manager.config_path != config_path:
        config_manager = ConfigManager(config_path)
    return config_manager.get_config()

def reload_config():
    """Reload the global configuration."""
    if config_manager is None:
        get_config()
    else:
        config_manager.reload_config()
