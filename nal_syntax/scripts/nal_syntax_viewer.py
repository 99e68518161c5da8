r"""
.. _nal-syntax-viewer:

``nal-syntax-viewer``
=====================

A command-line utility for displaying the syntax of the units in an HEVC or
MPEG-2 video elementary stream (in the start code delimited byte stream
format).

Usage
-----

Pass the filename of the stream and its codec::

    $ nal-syntax-viewer stream.hevc --codec hevc
    Unit 0: complete
    NalUnit:
      nal_unit_header: NalUnitHeader:
        forbidden_zero_bit: 0
        nal_unit_type: VPS_NUT (32)
        ...

Units which refer to a parameter set which has not yet been seen are
reported as pending and shown again once they have been reparsed.

With ``--show-log`` the offset and size of every field read is listed after
each unit.

The exit status is 0 if every unit was parsed and 1 otherwise.


Arguments
---------

The complete set of arguments can be listed using ``--help``

.. program-output:: nal-syntax-viewer --help

"""

import os
import sys
import logging
import traceback

from argparse import ArgumentParser

from nal_syntax import __version__

from nal_syntax.tables import Codecs

from nal_syntax.settings import make_settings

from nal_syntax.annexb import split_annexb

from nal_syntax.bitstream import format_log

from nal_syntax.parser import Complete, PendingReparse, Failed, parse_units


class NalSyntaxViewer(object):
    def __init__(self, filename, codec, show_log, verbose):
        """
        Parameters
        ==========
        filename : str
            The stream filename to read from.
        codec : :py:class:`~nal_syntax.tables.Codecs`
        show_log : bool
            If True, print the diagnostic log of each unit.
        verbose : int
            If >=1, show Python stack traces on failure.
        """
        self._filename = filename
        self._codec = codec
        self._show_log = show_log
        self._verbose = verbose

    def run(self):
        """
        Parse and display the stream. Returns 0 if every unit was parsed
        and 1 otherwise.
        """
        try:
            with open(self._filename, "rb") as f:
                data = f.read()
        except (IOError, OSError) as e:
            self._print_error(str(e))
            return 1

        units = split_annexb(data, self._codec)
        if not units:
            sys.stderr.write("Warning: no start codes found in {}.\n".format(self._filename))

        settings = make_settings(codec=self._codec, enable_diagnostic_log=self._show_log)

        return_code = 0
        for result in parse_units(units, settings=settings):
            if isinstance(result, Complete):
                self._print_complete(result)
            elif isinstance(result, PendingReparse):
                self._print_pending(result)
            elif isinstance(result, Failed):
                self._print_failed(result)
                return_code = 1

        return return_code

    def _print_log(self, log):
        if self._show_log and log:
            print("")
            print(format_log(log))

    def _print_complete(self, result):
        print("Unit {}: complete".format(result.unit_index))
        print(str(result.structure))
        for warning in result.warnings:
            print("Warning: {}".format(warning))
        self._print_log(result.log)
        print("")

    def _print_pending(self, result):
        print(
            "Unit {}: pending (waiting for {})".format(
                result.ticket.unit_index,
                ", ".join(str(key) for key in result.ticket.missing_references),
            )
        )
        print("")

    def _print_failed(self, result):
        print(
            "Unit {}: failed at bit offset {} ({})".format(
                result.unit_index,
                result.error.offset,
                result.error_kind.name,
            )
        )
        print(str(result.structure))
        self._print_log(result.log)
        print("")
        self._print_error(result.error.explain().strip(), result.error)

    def _print_error(self, message, exception=None):
        """
        Print an error message to stderr.
        """
        # Avoid interleaving with stdout (and make causality clearer)
        sys.stdout.flush()

        if self._verbose >= 1 and exception is not None:
            traceback.print_exception(
                type(exception), exception, exception.__traceback__
            )

        prog = os.path.basename(sys.argv[0])
        sys.stderr.write("{}: error: {}\n".format(prog, message))


def parse_args(*args, **kwargs):
    """
    Parse a set of command line arguments. Returns a :py:mod:`argparse`
    ``args`` object with the following fields:

    * file (str): The filename of the stream to read
    * codec (:py:class:`~nal_syntax.tables.Codecs`)
    * show_log (bool): True if the diagnostic log is to be printed.
    * verbose (int): The verbosity level.
    """
    parser = ArgumentParser(
        description="""
        Display the syntax of the units in an HEVC or MPEG-2 video elementary
        stream.
    """
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    parser.add_argument(
        "file",
        help="""
            The filename of the start code delimited stream to display.
        """,
    )

    parser.add_argument(
        "--codec",
        "-c",
        choices=[codec.name for codec in Codecs],
        default=Codecs.hevc.name,
        help="""
            The codec of the stream. (Default: %(default)s).
        """,
    )

    parser.add_argument(
        "--show-log",
        "-l",
        action="store_true",
        default=False,
        help="""
            Print the offset and length of every field read.
        """,
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="""
            Show additional information. Specify once to log warnings and
            stack traces for failed units, twice to log every unit's progress.
        """,
    )

    args = parser.parse_args(*args, **kwargs)

    args.codec = Codecs[args.codec]

    return args


def main(*args, **kwargs):
    args = parse_args(*args, **kwargs)

    log_level = logging.ERROR
    if args.verbose >= 2:
        log_level = logging.DEBUG
    elif args.verbose >= 1:
        log_level = logging.WARNING
    logging.basicConfig(level=log_level)

    viewer = NalSyntaxViewer(
        filename=args.file,
        codec=args.codec,
        show_log=args.show_log,
        verbose=args.verbose,
    )
    return viewer.run()


if __name__ == "__main__":
    sys.exit(main())
