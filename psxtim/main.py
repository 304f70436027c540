# encoding: utf8
import argparse
import logging
import os
import sys

import png

import psxtim
from psxtim import defaults

log = logging.getLogger(__name__)


def main(junk, *argv):
    parser = create_parser()

    if len(argv) <= 0:
        parser.print_help()
        sys.exit()

    args = parser.parse_args(argv)
    configure_logging(args)
    if not args.func(parser, args):
        sys.exit(1)


def setuptools_entry():
    main(*sys.argv)


def create_parser():
    """Build and return an ArgumentParser.
    """
    # Slightly clumsy workaround to make both `info -v` and `-v info` work.
    # The defaults are suppressed so a subcommand doesn't clobber a value
    # given before it
    common_parser = argparse.ArgumentParser(add_help=False)
    common_parser.add_argument(
        '-q', '--quiet', dest='verbose', default=argparse.SUPPRESS, action='store_false',
        help=u'Only print errors.',
    )
    common_parser.add_argument(
        '-v', '--verbose', dest='verbose', default=argparse.SUPPRESS, action='store_true',
        help=u'Print details about every file and block as it is read.',
    )

    parser = argparse.ArgumentParser(
        prog='psxtim', description=u'Decode PlayStation TIM images',
        parents=[common_parser],
    )

    cmds = parser.add_subparsers(title='commands', metavar='<command>', help='commands')
    cmds.required = True
    cmd_help = cmds.add_parser(
        'help', help=u'Display this message',
        parents=[common_parser])
    cmd_help.set_defaults(func=command_help)

    cmd_convert = cmds.add_parser(
        'convert', help=u'Convert TIM files to PNG',
        parents=[common_parser])
    cmd_convert.set_defaults(func=command_convert)
    cmd_convert.add_argument(
        '-o', '--output-dir', dest='output_dir', default=None,
        help=u'Directory to write the PNGs to.  Defaults to the '
            u'PSXTIM_OUTPUT_DIR environment variable, or the current '
            u'directory.',
    )
    cmd_convert.add_argument('files', nargs='+', metavar='FILE')

    cmd_info = cmds.add_parser(
        'info', help=u'Print the headers of TIM files',
        parents=[common_parser])
    cmd_info.set_defaults(func=command_info)
    cmd_info.add_argument('files', nargs='+', metavar='FILE')

    return parser


def configure_logging(args):
    verbose = getattr(args, 'verbose', None)
    if verbose is None:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.ERROR
    logging.basicConfig(format='%(levelname)s: %(message)s', level=level)


def get_output_dir(args):
    """Returns the directory converted files should go in."""

    output_dir = args.output_dir
    got_from = 'command line'

    if output_dir is None:
        output_dir, got_from = defaults.get_default_output_dir_with_origin()

    log.info("Writing PNGs to %s (from %s)", output_dir, got_from)

    return output_dir


def command_convert(parser, args):
    output_dir = get_output_dir(args)
    os.makedirs(output_dir, exist_ok=True)

    ok = True
    for filename in args.files:
        basename = os.path.splitext(os.path.basename(filename))[0]
        out_path = os.path.join(output_dir, basename + '.png')
        try:
            image = psxtim.load(filename)
        except (psxtim.TimDecodeError, OSError) as e:
            log.error("Couldn't convert %s: %s", filename, e)
            ok = False
            continue

        if not (image.width and image.height):
            # PNG can't hold a zero-sized image
            log.error(
                "Couldn't convert %s: the image is empty (%dx%d)",
                filename, image.width, image.height)
            ok = False
            continue

        try:
            with open(out_path, 'wb') as f:
                image.write_to_png(f)
        except (png.Error, OSError) as e:
            log.error("Couldn't write %s: %s", out_path, e)
            ok = False
            if os.path.exists(out_path):
                os.remove(out_path)
            continue

        print("{} -> {} ({}x{})".format(
            filename, out_path, image.width, image.height))

    return ok


def command_info(parser, args):
    ok = True
    for filename in args.files:
        try:
            with open(filename, 'rb') as f:
                info = psxtim.read_info(f)
        except (psxtim.TimDecodeError, OSError) as e:
            log.error("Couldn't read %s: %s", filename, e)
            ok = False
            continue

        print("{}:".format(filename))
        print("    type:        {}".format(info.image_type.name))
        print("    size:        {}x{}".format(info.width, info.height))
        if info.clut_header:
            clut = info.clut_header
            print("    color table: {} colors x {} at ({}, {})".format(
                clut.width, clut.height, clut.x, clut.y))
        else:
            print("    color table: none")
        image = info.image_header
        print("    vram origin: ({}, {})".format(image.x, image.y))

    return ok


def command_help(parser, args):
    parser.print_help()
    return True


if __name__ == '__main__':
    main(*sys.argv)
