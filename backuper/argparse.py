import os


def addArgumentParserBaseFlags(parser, logfileName):
    '''
    Adds the flags shared by every backuper script: verbosity, rc-file and
    debug logging.

    Provides ALL flags required by the Config class.
    '''
    parser.add_argument(
        "-v",
        dest="verbose",
        help="Increase verbosity (multiple times for more verbose)",
        action="append_const",
        const=1)
    parser.add_argument("--rc-file", dest="rcFile",
                        help="Specify path to rc-file (default=\"%(default)s\")",
                        default=os.getenv('BACKUPER_RC_FILE', "~/.config/backuprc"))
    parser.add_argument(
        "--debug",
        nargs="?",
        const=True,
        default=False,
        metavar="FILE",
        help="enable debug output, to stderr or to FILE (e.g. %s.log)" % logfileName)
    parser.add_argument(
        "-c",
        "--config",
        dest="configPath",
        metavar="PATH",
        help="Path to the jobs YAML file (default: $CONFIG_PATH)")
