import argparse
import logging
import sys

from chip8vm import config
from chip8vm.config import Quirks
from chip8vm.log import configure, set_logs
from chip8vm.rom import RomTooLarge, read_rom
from chip8vm.vm import Chip8


def build_parser():
    parser = argparse.ArgumentParser(prog="chip8vm", description="CHIP-8 virtual machine")
    parser.add_argument("rom", help="raw CHIP-8 program image")
    parser.add_argument("--cycles", type=int, default=config.CYCLES_PER_FRAME,
                        help="instructions run per 60 Hz frame (default: %(default)s)")
    parser.add_argument("--cosmac-keys", action="store_true",
                        help="use the COSMAC VIP 1234/QWER/ASDF/ZXCV block instead of one key per hex digit")
    parser.add_argument("--debug", action="store_true",
                        help="start paused and stay open after a fault for single-stepping")
    parser.add_argument("--logs", action="store_true", help="trace executed opcodes (F1 toggles)")
    quirks = parser.add_argument_group("quirks")
    quirks.add_argument("--no-vf-reset", action="store_true", help="8XY1/2/3 leave VF alone")
    quirks.add_argument("--shift-vx", action="store_true", help="8XY6/8XYE shift Vx in place")
    quirks.add_argument("--wrap-sprites", action="store_true", help="sprites wrap instead of clipping")
    quirks.add_argument("--keep-i", action="store_true", help="FX55/FX65 leave I unchanged")
    return parser


def quirks_from_args(args):
    return Quirks(
        vf_reset=not args.no_vf_reset,
        shift_vy=not args.shift_vx,
        clip_sprites=not args.wrap_sprites,
        increment_i=not args.keep_i,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.cycles < 1:
        parser.error("--cycles must be at least 1")
    configure(logging.DEBUG if args.logs else logging.INFO)
    set_logs(args.logs)

    try:
        rom = read_rom(args.rom)
    except (OSError, RomTooLarge) as e:
        logging.error("Failed to load ROM: %s", e)
        return 2

    vm = Chip8(quirks=quirks_from_args(args))
    vm.load_program(rom)

    # pyglet needs a display; keep it out of the import path of everything else
    import pyglet
    from chip8vm.window import COSMAC_KEYMAP, KEYMAP, Chip8Window

    window = Chip8Window(vm, args.cycles, keymap=COSMAC_KEYMAP if args.cosmac_keys else KEYMAP, debug=args.debug)
    pyglet.app.run()
    return window.exit_status


if __name__ == "__main__":
    sys.exit(main())
