import json
import logging
import os
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)


@dataclass
class ViewportConfig:
    zoom_factor: float = 1.1
    min_scale: float = 1.0
    clamped: bool = True
    fps: int = 60


@dataclass
class UIConfig:
    theme: str = 'dark'
    surface_width: int = 800
    surface_height: int = 600
    show_status: bool = True
    last_image: str = ''


class ConfigManager:
    def __init__(self, config_file='config.json'):
        self.config_file = config_file
        self.viewport = ViewportConfig()
        self.ui = UIConfig()
        self.load_config()

    def load_config(self):
        """Load configuration from file with error handling."""
        if os.path.exists(self.config_file):
            try:
                with open(self.config_file, 'r') as f:
                    data = json.load(f)

                if 'viewport' in data:
                    viewport_data = data.get('viewport', {})
                    self.viewport = ViewportConfig(
                        zoom_factor=float(viewport_data.get('zoom_factor', 1.1)),
                        min_scale=float(viewport_data.get('min_scale', 1.0)),
                        clamped=bool(viewport_data.get('clamped', True)),
                        fps=int(viewport_data.get('fps', 60))
                    )

                if 'ui' in data:
                    ui_data = data.get('ui', {})
                    self.ui = UIConfig(
                        theme=str(ui_data.get('theme', 'dark')),
                        surface_width=int(ui_data.get('surface_width', 800)),
                        surface_height=int(ui_data.get('surface_height', 600)),
                        show_status=bool(ui_data.get('show_status', True)),
                        last_image=str(ui_data.get('last_image', ''))
                    )

                logger.info("[Config] Loaded from %s", self.config_file)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.error("[Config] Error loading config: %s", e)
                logger.warning("[Config] Using default configuration")
                self._create_default_config()
        else:
            logger.warning("[Config] %s not found, creating default", self.config_file)
            self._create_default_config()
            self.save_config()

    def _create_default_config(self):
        """Create default configuration."""
        self.viewport = ViewportConfig()
        self.ui = UIConfig()

    def save_config(self):
        """Save configuration to file with error handling."""
        try:
            config_data = {
                'viewport': asdict(self.viewport),
                'ui': asdict(self.ui)
            }

            # Create directory if it doesn't exist
            config_dir = os.path.dirname(self.config_file)
            if config_dir and not os.path.exists(config_dir):
                os.makedirs(config_dir)

            with open(self.config_file, 'w') as f:
                json.dump(config_data, f, indent=4, ensure_ascii=False)

            logger.info("[Config] Saved to %s", self.config_file)
            return True
        except OSError as e:
            logger.error("[Config] Error saving config: %s", e)
            return False

    def update_viewport_config(self, **kwargs):
        """Update viewport configuration, ignoring unknown keys."""
        for key, value in kwargs.items():
            if hasattr(self.viewport, key):
                setattr(self.viewport, key, value)
            else:
                logger.warning("[Config] Unknown viewport setting: %s", key)
        return True

    def update_ui_config(self, **kwargs):
        """Update UI configuration, ignoring unknown keys."""
        for key, value in kwargs.items():
            if hasattr(self.ui, key):
                setattr(self.ui, key, value)
            else:
                logger.warning("[Config] Unknown UI setting: %s", key)
        return True

    def validate_config(self):
        """Validate all configuration values."""
        try:
            # Validate viewport config
            assert self.viewport.zoom_factor > 1, "Zoom factor must be greater than 1"
            assert self.viewport.min_scale > 0, "Min scale must be positive"
            assert self.viewport.fps > 0, "FPS must be positive"

            # Validate UI config
            assert self.ui.theme in ['dark', 'light'], "Theme must be 'dark' or 'light'"
            assert self.ui.surface_width > 0, "Surface width must be positive"
            assert self.ui.surface_height > 0, "Surface height must be positive"

            return True
        except AssertionError as e:
            logger.error("[Config] Validation error: %s", e)
            return False
