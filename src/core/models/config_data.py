from dataclasses import dataclass, field
from typing import List

from core.models.monitor_enum import StatusRule


@dataclass
class configRoomData:
    id: str
    name: str = "Unnamed Room"
    location: str = ""
    description: str = ""
    isActive: bool = True


@dataclass
class configData:
    rooms: List[configRoomData] = field(default_factory=list)
    emulation: bool = True
    statusRule: StatusRule = StatusRule.STRICT
    autoProvisionRooms: bool = False
