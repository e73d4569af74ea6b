import asyncio
import json
import logging
from typing import Optional

import serial
from pydantic import ValidationError

from core.models.reading import Reading
from core.services.command_mailbox import CommandMailbox
from core.services.ingestion import IngestionCoordinator

logger = logging.getLogger(__name__)


def parse_device_line(line: str) -> Optional[Reading]:
    """
    Parse one newline-delimited JSON frame from a device.

    Returns None (and logs) for anything that is not a valid reading, so a
    noisy line never stops the reader.
    """
    line = line.strip()
    if not line:
        return None
    try:
        payload = json.loads(line)
    except json.JSONDecodeError:
        logger.warning(f"[Serial] Ignoring non-JSON line: {line!r}")
        return None
    if not isinstance(payload, dict):
        logger.warning(f"[Serial] Ignoring JSON that is not an object: {line!r}")
        return None
    try:
        return Reading.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"[Serial] Invalid reading {line!r}: {e.error_count()} error(s)")
        return None


class SerialBridge:
    """
    Reads readings from a device attached over USB serial and feeds them to
    the ingestion coordinator.

    After each accepted reading the bridge polls the room's command slot and
    writes a pending command back down the same line as
    ``{"id": ..., "command": ...}``.
    The port is closed and reopened after any I/O error.
    """

    def __init__(
        self,
        port: str,
        coordinator: IngestionCoordinator,
        mailbox: CommandMailbox,
        baudrate: int = 115200,
        reconnect_delay: float = 1.0,
    ):
        self.port = port
        self.baudrate = baudrate
        self.coordinator = coordinator
        self.mailbox = mailbox
        self.reconnect_delay = reconnect_delay
        self.running = False
        self.connected = False
        self._ser: Optional[serial.Serial] = None

    async def handle_line(self, line: str) -> Optional[Reading]:
        reading = parse_device_line(line)
        if reading is None:
            return None

        room = await self.coordinator.ingest(reading)
        if room is None:
            return reading

        command = await self.mailbox.poll(reading.room_id)
        if command is not None:
            self._write({"id": reading.room_id, "command": command})
        return reading

    def _write(self, message: dict):
        if self._ser is None:
            logger.warning(f"[Serial] Cannot forward {message}, port {self.port} is closed")
            return
        try:
            self._ser.write((json.dumps(message) + "\n").encode("utf-8"))
        except (serial.SerialException, OSError) as e:
            logger.warning(f"[Serial] Failed to write to {self.port}: {e}")

    async def read_line(self) -> Optional[str]:
        """Read one line if available. Returns None when there is nothing to read."""
        try:
            if self._ser is None:
                self._ser = serial.Serial(self.port, self.baudrate, timeout=0.1)
                if not self.connected:
                    logger.warning(f"[Serial] Device connected on {self.port} @ {self.baudrate} baud")
                    self.connected = True
            if self._ser.in_waiting > 0:
                try:
                    line = self._ser.readline().decode('utf-8').strip()
                    if line:
                        return line
                except UnicodeDecodeError:
                    logger.warning(f"[Serial] Error decoding data from {self.port}")
            await asyncio.sleep(0.01)
            return None
        except (serial.SerialException, OSError) as e:
            if self.connected:
                logger.warning(f"[Serial] Device disconnected from {self.port}: {e}")
                self.connected = False
            self.close()
            await asyncio.sleep(self.reconnect_delay)
            return None

    async def run(self):
        self.running = True
        logger.info(f"Serial bridge listening on {self.port}")
        try:
            while self.running:
                line = await self.read_line()
                if line:
                    await self.handle_line(line)
        finally:
            self.close()

    def stop(self):
        self.running = False

    def close(self):
        if self._ser is not None:
            try:
                self._ser.close()
            except (serial.SerialException, OSError) as e:
                logger.debug(f"[Serial] Error closing {self.port}: {e}")
            self._ser = None
