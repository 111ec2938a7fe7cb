"""
SBRAC CLI - Command Line Interface for the sealed-bid reverse auction

Main entry point for all CLI commands.
"""

import json
import click

from sbrac.utils.logger import configure_logging, get_logger

logger = get_logger("cli")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=None, help="Path to a .env configuration file")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, env_file):
    """Sealed-Bid Reverse Auction - private clearing price computation"""
    from sbrac.core.config import load_config

    config = load_config(env_file)
    configure_logging(config, debug=debug)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _resolve_group(ctx, group):
    from sbrac.crypto import get_group

    name = group or ctx.obj["config"].group
    try:
        return get_group(name)
    except KeyError as exc:
        raise click.BadParameter(str(exc), param_hint="--group")


# =============================================================================
# Auction Commands
# =============================================================================


@cli.command("run")
@click.argument("bids", nargs=-1, type=int)
@click.option("--bit-length", "-l", type=int, default=None, help="Bid bit length (default from config)")
@click.option("--group", default=None, help="Group preset (modp2048, toy)")
@click.option("--verbose", "-v", is_flag=True, help="Show per-round decisions")
@click.pass_context
def run_command(ctx, bids, bit_length, group, verbose):
    """Compute the clearing price for BIDS"""
    from sbrac.core.auction import ClearingPriceEngine
    from sbrac.core.errors import PreconditionViolation

    params = _resolve_group(ctx, group)
    if bit_length is None:
        bit_length = ctx.obj["config"].bit_length

    engine = ClearingPriceEngine(params)
    try:
        result = engine.run_auction(list(bids), bit_length)
    except PreconditionViolation as exc:
        raise click.ClickException(str(exc))

    if verbose:
        for record in result.rounds:
            eliminated = ", ".join(str(i) for i in record.eliminated) or "-"
            click.echo(f"  round {record.position}: bit={record.bit} eliminated={eliminated}")

    click.echo(f"Clearing price: {result.clearing_price}")
    click.echo(f"Winners: {', '.join(str(i) for i in result.winners) or 'none'}")


@cli.command("prove")
@click.option("--bit", type=int, required=True, help="Bit to encode (0 or 1)")
@click.option("--position", type=int, default=0, help="Bit position bound into the proof")
@click.option("--bid", type=int, default=0, help="Bid to commit to")
@click.option("--group", default=None, help="Group preset (modp2048, toy)")
@click.pass_context
def prove_command(ctx, bit, position, bid, group):
    """Generate and verify a bit proof"""
    from sbrac.crypto import int_to_hex
    from sbrac.core.auction import commit_bid
    from sbrac.core.errors import InvalidBitError, PreconditionViolation
    from sbrac.core.prover import commit_bit, generate_bit_proof, verify_bit_proof

    params = _resolve_group(ctx, group)

    try:
        commitment, _ = commit_bid(params, bid)
        value, t, s = commit_bit(params, bit)
        proof = generate_bit_proof(params, commitment, value, t, s, bit, position)
    except (InvalidBitError, PreconditionViolation) as exc:
        raise click.ClickException(str(exc))

    valid = verify_bit_proof(params, commitment, value, proof, position)

    transcript = {
        "group": params.name,
        "position": position,
        "commitment": int_to_hex(commitment.value),
        "value": int_to_hex(value),
        "proof": proof.to_dict(),
        "valid": valid,
    }
    click.echo(json.dumps(transcript, indent=2))
    if not valid:
        raise click.ClickException("generated proof failed verification")


@cli.command("bench")
@click.option("--group", default=None, help="Group preset (modp2048, toy)")
@click.option("--scale", type=int, default=1, help="Iteration multiplier")
@click.pass_context
def bench_command(ctx, group, scale):
    """Run performance benchmarks"""
    from sbrac.utils.benchmark import run_all_benchmarks

    run_all_benchmarks(_resolve_group(ctx, group), scale)


if __name__ == "__main__":
    cli()
