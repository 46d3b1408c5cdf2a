#!/usr/bin/env python3
"""
Per-sample to INFO summary annotation

Take the values of one FORMAT field across all samples of each VCF record
and add their mean, median, min or max to the site-level INFO column.
Reads a VCF file (or standard input) and writes the annotated VCF to
standard output or to --output.
"""
import argparse
import logging
import os
import sys
from pathlib import Path

# Add vcf_utils to path
script_dir = Path(__file__).parent
if str(script_dir) not in sys.path:
    sys.path.insert(0, str(script_dir))

from common.stat_config import (
    DEFAULT_STATISTIC,
    STATISTIC_CHOICES,
    RunConfig,
    print_configuration_summary,
)
from vcf_utils.error_handler import (
    EXIT_SUCCESS,
    ConfigError,
    Sample2InfoError,
    describe_error,
    exit_code_for,
)
from vcf_utils.logging_config import configure_logging, get_operational_logger
from vcf_utils.record_stream import VariantStream
from vcf_utils.sample_to_info import SampleStatAnnotator

logger = logging.getLogger("vcfsample2info")


def argparser():
    parser = argparse.ArgumentParser(
        prog="vcfsample2info",
        description="Add a summary statistic of a per-sample FORMAT field to the INFO column",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Take annotations given in the per-sample fields and add the mean, median,
min, or max to the site-level INFO. The median of an even number of values
is the lower of the two central values.

Examples:
  vcfsample2info -f DP -i DP_MEAN calls.vcf.gz > annotated.vcf
  bcftools view calls.bcf | vcfsample2info -f GQ -i GQ_MIN --min
  vcfsample2info -f DP -i DP_MEDIAN --median -o annotated.vcf.gz calls.vcf

Type: transformation
        """
    )
    parser.add_argument("vcf", nargs="?", help="Input VCF file (.gz allowed); standard input if omitted")
    parser.add_argument("-f", "--field", help="Add information about this field in samples to INFO column")
    parser.add_argument("-i", "--info", help="Store the computed statistic in this info field")
    stat_group = parser.add_mutually_exclusive_group()
    stat_group.add_argument("-a", "--average", dest="statistic", action="store_const", const="mean",
                            help="Take the mean of samples for field (default)")
    stat_group.add_argument("-m", "--median", dest="statistic", action="store_const", const="median",
                            help="Use the median")
    stat_group.add_argument("-n", "--min", dest="statistic", action="store_const", const="min",
                            help="Use the min")
    stat_group.add_argument("-x", "--max", dest="statistic", action="store_const", const="max",
                            help="Use the max")
    stat_group.add_argument("--stat", dest="statistic", choices=STATISTIC_CHOICES,
                            help=f"Statistic by name (default: {DEFAULT_STATISTIC})")
    parser.add_argument("-o", "--output", help="Output VCF file (.gz for BGZF); standard output if omitted")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: $VCFSAMPLE2INFO_LOG_LEVEL or WARNING)")
    parser.add_argument("--metrics-report", metavar="JSON", help="Write run metrics to this JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.set_defaults(statistic=DEFAULT_STATISTIC)
    return parser


def run(argv=None):
    """
    Run the annotation and return the process exit status.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        int: Exit status
    """
    parser = argparser()
    argv = sys.argv[1:] if argv is None else list(argv)

    if not argv and sys.stdin.isatty():
        parser.print_help(sys.stderr)
        return EXIT_SUCCESS

    args = parser.parse_args(argv)

    if args.verbose:
        log_level = "DEBUG"
    else:
        log_level = args.log_level or os.environ.get("VCFSAMPLE2INFO_LOG_LEVEL", "WARNING")
    configure_logging(log_level)

    try:
        config = RunConfig(
            sample_field=args.field,
            info_field=args.info,
            statistic=args.statistic,
            input_vcf=args.vcf,
            output_vcf=args.output,
        )
        valid, errors = config.validate()
        if not valid:
            raise ConfigError("; ".join(errors))
        if args.verbose:
            print_configuration_summary(config)

        operational_logger = get_operational_logger(log_level=log_level)

        with VariantStream.open(config.input_vcf, output=config.output_vcf) as stream:
            annotator = SampleStatAnnotator(
                stream,
                sample_field=config.sample_field,
                info_field=config.info_field,
                statistic=config.statistic,
                operational_logger=operational_logger,
            )
            annotator.run()

        operational_logger.log_resource_usage("final")
        if args.metrics_report:
            operational_logger.save_metrics_report(Path(args.metrics_report))
        return EXIT_SUCCESS

    except (Sample2InfoError, OSError, KeyboardInterrupt) as e:
        logger.debug("Annotation failed", exc_info=not isinstance(e, KeyboardInterrupt))
        print(describe_error(e), file=sys.stderr)
        return exit_code_for(e)


def main():
    sys.exit(run())


if __name__ == '__main__':
    main()
