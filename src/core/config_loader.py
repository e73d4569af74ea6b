import json
import logging
from pathlib import Path
from typing import List, Optional

from core.models.config_data import configData, configRoomData
from core.models.monitor_enum import StatusRule

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and manages room configuration from JSON file."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
            cls._instance._config = configData()
            cls._instance._config_path = None
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._config = self._get_default_config()
            self.load_config()
            self._initialized = True

    @staticmethod
    def get_config_path() -> Path:
        """Get the path to the rooms_config.json file."""
        # Config file lives in the project root/config directory
        return Path(__file__).parent.parent.parent / "config" / "rooms_config.json"

    def load_config(self, config_path: Optional[Path] = None):
        """Load configuration from JSON file."""
        config_path = config_path or self._config_path or self.get_config_path()
        self._config_path = config_path

        # Start from defaults so a broken file never leaves us without rooms
        self._config = self._get_default_config()

        if not config_path.exists():
            logger.error(f"Configuration file not found: {config_path}")
            return

        try:
            with open(config_path, 'r') as f:
                json_data = json.load(f)

            rooms = []
            for room_cfg in json_data.get("rooms", []):
                if "id" not in room_cfg:
                    logger.warning(f"Skipping room without id in config: {room_cfg}")
                    continue
                rooms.append(configRoomData(
                    id=str(room_cfg["id"]),
                    name=room_cfg.get("name", f"Room {room_cfg['id']}"),
                    location=room_cfg.get("location", ""),
                    description=room_cfg.get("description", ""),
                    isActive=room_cfg.get("active", True),
                ))
            self._config.rooms = rooms
            self._config.emulation = json_data.get("emulation", True)
            self._config.statusRule = StatusRule(json_data.get("status_rule", StatusRule.STRICT.value))
            self._config.autoProvisionRooms = json_data.get("auto_provision_rooms", False)
            logger.info(f"Configuration loaded from {config_path}")

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse configuration file: {e}")
            self._config = self._get_default_config()

        except ValueError as e:
            logger.error(f"Invalid value in configuration file: {e}")
            self._config = self._get_default_config()

        except Exception as e:
            logger.error(f"Unexpected error loading configuration: {e}")
            self._config = self._get_default_config()

    @staticmethod
    def _get_default_config() -> configData:
        """Return default configuration."""
        return configData(
            emulation=True,
            statusRule=StatusRule.STRICT,
            autoProvisionRooms=False,
            rooms=[
                configRoomData("1", name="Living Room", location="Ground Floor", description="Main living area"),
                configRoomData("2", name="Kitchen", location="Ground Floor", description="Cooking area"),
                configRoomData("3", name="Master Bedroom", location="First Floor", description="Main bedroom"),
                configRoomData("4", name="Basement", location="Basement", description="Storage area"),
                configRoomData("5", name="Garage", location="Ground Floor", description="Vehicle parking"),
            ],
        )

    def get_emulation_mode(self) -> bool:
        """Get the emulation mode setting."""
        return self._config.emulation

    def get_status_rule(self) -> StatusRule:
        return self._config.statusRule

    def get_auto_provision_rooms(self) -> bool:
        return self._config.autoProvisionRooms

    def get_rooms(self) -> List[configRoomData]:
        """Get all configured rooms."""
        return list(self._config.rooms)

    def get_room_config(self, room_id: str) -> Optional[configRoomData]:
        """Get configuration for a specific room, None if it is not configured."""
        for room in self._config.rooms:
            if room.id == room_id:
                return room
        return None

    def reload_config(self):
        """Reload configuration from file."""
        self.load_config()
        logger.info("Configuration reloaded")


# Global singleton instance
config_loader = ConfigLoader()
