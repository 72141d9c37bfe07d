"""Command line interface for baginject."""
import logging
from pathlib import Path
from typing import Optional
import click

from baginject.baginject import run
from baginject.config import config_from_env
from baginject.errors import BagInjectError

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


@click.command()
@click.option(
    '-w',
    '--work-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Working location the bag is copied to and updated in (replaced if it exists)',
)
@click.option('--vendor', default=None, help='Prefix for the hostname and pathname fields added to bag-info.txt')
@click.option('--work-order-pattern', default=None, help='Regular expression locating the work order in the bag')
@click.option('--transfer-info-pattern', default=None, help='Regular expression locating transfer-info in the bag')
@click.option('--strict-match/--no-strict-match', default=None, help='Fail when a pattern matches more than one file')
@click.option('-v', '--verbose/--no-verbose', default=False, help='Print more information about the process')
@click.argument('input_path', metavar='INPUT', type=click.Path(exists=True, file_okay=False, path_type=Path))
def cli(
  work_dir: Optional[Path],
  vendor: Optional[str],
  work_order_pattern: Optional[str],
  transfer_info_pattern: Optional[str],
  strict_match: Optional[bool],
  verbose: bool,
  input_path: Path,
):
    """Copy the bag at INPUT, inject its work order and transfer-info, and update its tag manifest."""
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, format=LOG_FORMAT)

    config = config_from_env().override(
        work_dir=work_dir,
        vendor=vendor,
        work_order_pattern=work_order_pattern,
        transfer_info_pattern=transfer_info_pattern,
        strict_match=strict_match,
    )
    try:
        result = run(input_path, config)
    except BagInjectError as e:
        raise click.ClickException(str(e)) from e
    click.echo(str(result.bag_path))


if __name__ == "__main__":
    cli()
