#! /usr/bin/python
#
####################################################################################################
# 				SetRxns
# 		SetRxns reads the reaction subroutines of TUV and the order in which they are called
# 		and rewrites the reaction section of the TUV input files, the DSMACC include files
# 		and the wiki tables so that all of them use the same reaction numbers.
#
####################################################################################################
# All code that is run by this script resides in src/tuvrxns/setrxns.py

try:
    from tuvrxns import run_setrxns
    from tuvrxns.config import SetrxnsConfig
except ModuleNotFoundError as err:
    raise ModuleNotFoundError(
        "The tuvrxns module could not be found, please make sure it is "
        "installed with `pip install -e .` from the repository root."
    ) from err
import logging
import pathlib
from argparse import ArgumentParser


def get_args():
    """
    Allows for interacting with SetRxns.py via the command line.

    Examples:
        python3 SetRxns.py user_settings.yaml --verbosity_stdout INFO
        python3 SetRxns.py user_settings.yaml --flags 2
        python3 SetRxns.py --generate-template
        python3 SetRxns.py --help-config

    Returns:
        Namespace: Arguments passed via the CLI or their defaults
    """
    parser = ArgumentParser(
        description="SetRxns: Regenerate TUV input files, DSMACC include files and wiki tables"
    )

    parser.add_argument(
        "settings_path",
        nargs="?",
        default="user_settings.yaml",
        type=pathlib.Path,
        help="Path to YAML configuration file (default: user_settings.yaml)",
    )
    parser.add_argument(
        "-f",
        "--flags",
        default=None,
        type=str,
        help=(
            "Override the flag policy: PRESERVE_EXISTING (-1), ALL_FALSE (0), ALL_TRUE (1), "
            "MATCH_DB_A (2) or MATCH_DB_B (3)"
        ),
    )

    parser.add_argument(
        "-v",
        "--verbosity_stdout",
        default="WARNING",
        type=str,
        help="Console output verbosity (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug mode (same as --verbosity_stdout DEBUG)",
    )

    parser.add_argument(
        "--generate-template",
        action="store_true",
        help="Generate a template configuration file and exit",
    )
    parser.add_argument(
        "--help-config",
        action="store_true",
        help="Print detailed help about configuration parameters and exit",
    )

    return parser.parse_args()


def get_logger(verbosity_stdout: str, debug: bool):
    """Define a logger that logs both to file and stdout"""
    if debug:
        verbosity_file = logging.DEBUG
        verbosity_stdout = "DEBUG"
    else:
        verbosity_file = logging.INFO
    if verbosity_stdout.upper() == "DEBUG":
        verbosity_file = logging.DEBUG
    logging.basicConfig(
        level=verbosity_file,
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%m-%d %H:%M",
        filename="setrxns.log",
        filemode="w",
    )
    # warnings and errors also go to the console
    console = logging.StreamHandler()
    console.setLevel(verbosity_stdout.upper())
    console.setFormatter(logging.Formatter(" %(levelname)-8s %(message)s"))
    logging.getLogger("").addHandler(console)

    logging.info(
        f"Configured the logging. File verbosity is {logging.getLevelName(verbosity_file)} "
        f"and stdout verbosity is {verbosity_stdout}"
    )


if __name__ == "__main__":
    args = get_args()

    if args.help_config:
        SetrxnsConfig.print_help()
        exit(0)

    if args.generate_template:
        SetrxnsConfig.generate_template("user_settings_template.yaml")
        exit(0)

    get_logger(args.verbosity_stdout, args.debug)

    result = run_setrxns(args.settings_path, flag_policy=args.flags)
    if result.report.has_warnings():
        print("Finished with warnings, see setrxns.log for details.")
