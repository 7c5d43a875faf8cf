import argparse
import sys

import yaml

from Instruction import InputError, InputTruncated
from Simulator import Simulator
from Timing import TimingConfig


def to_stderr(message):
    print(message, file=sys.stderr)


def read_program(stream):
    """
    Read the instruction count and then that many instruction lines.

    Args:
        stream: text stream; the first token of the first line is the count,
            anything after it on that line is ignored

    Returns:
        list: the instruction lines, newlines stripped

    Raises:
        InputError: the count is missing, not an integer or negative
        InputTruncated: fewer lines than the count announces
    """
    header = stream.readline().split()
    try:
        count = int(header[0])
    except (IndexError, ValueError):
        raise InputError(f"Failed to read number of instructions: {' '.join(header)!r}")
    if count < 0:
        raise InputError(f"Number of instructions must not be negative: {count}")

    program = []
    for i in range(count):
        line = stream.readline()
        if not line:
            raise InputTruncated(f"Failed to read instruction {i + 1} of {count}")
        program.append(line.rstrip("\r\n"))
    return program


def main(argv=None, stdin=None, stdout=None):
    parser = argparse.ArgumentParser(description='5-stage pipeline hazard simulator')
    parser.add_argument('--config', type=str, default=None,
                        help='YAML file with a timing_config section.')
    parser.add_argument('--verbose', action='store_true',
                        help='Print the per-stage schedule to stderr.')
    parser.add_argument('--plot', action='store_true',
                        help='Show the pipeline chart.')
    args = parser.parse_args(argv)

    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    try:
        timing = TimingConfig.from_yaml(args.config) if args.config else TimingConfig()
        program = read_program(stdin)
    except (InputError, ValueError, OSError, yaml.YAMLError) as e:
        to_stderr(f"Error: {e}")
        return 1

    sim = Simulator(timing=timing,
                    debug=to_stderr if args.verbose else None,
                    warn=to_stderr)
    sim.load_program(program)
    sim.run()

    print(sim.clock, file=stdout)

    if args.verbose:
        to_stderr(f"Stalls: {sim.stall_count}, IPC: {sim.get_ipc():.3f}")
    if args.plot and sim.instructions:
        sim.display()
    return 0


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
