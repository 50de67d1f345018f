from pathlib import Path

from chip8vm.config import MAX_PROGRAM_SIZE
from chip8vm.log import logger


class RomTooLarge(ValueError):

    def __init__(self, path, size):
        self.path = path
        self.size = size
        super().__init__("%s is %d bytes; a CHIP-8 program can be at most %d bytes" % (path, size, MAX_PROGRAM_SIZE))


def read_rom(path):
    """Read a raw ROM image, refusing anything that will not fit at 0x200."""
    path = Path(path)
    logger.info("Loading ROM: %s", path)
    data = path.read_bytes()
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomTooLarge(path, len(data))
    return data
