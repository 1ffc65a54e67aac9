import sys
import os
import argparse
import subprocess

# Add src to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from querier.config import load_config, apply_fixtures
from querier.simulator import new_simulator


def run_query(config_path, request_bytes, trace_file=None):
    """Answer one serialized query from the configured fixtures, return the envelope bytes."""
    config = load_config(config_path)
    sim = new_simulator(config=config, trace_file=trace_file)
    apply_fixtures(sim, config.get("fixtures"))
    return sim.raw_query(request_bytes).to_bytes()


def run_tests():
    """Run all pytest tests."""
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "tests/", "-v", "--tb=short"],
        cwd=os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
        capture_output=False
    )
    return result.returncode


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Mock chain querier - answer serialized queries from fixtures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --request '{"bank":{"balance":{"address":"reward","denom":"uusd"}}}'
  echo '{"wasm":{"smart":{...}}}' | python main.py --config config/default_config.yaml
  python main.py --mode test                               # Run all tests
        """
    )

    parser.add_argument(
        "--mode",
        type=str,
        choices=["query", "test"],
        default="query",
        help="Execution mode (default: query)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/default_config.yaml",
        help="Path to config/fixtures file"
    )
    parser.add_argument(
        "--request",
        type=str,
        default=None,
        help="Query request JSON (default: read from stdin)"
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Write the query trace as JSON lines to stderr"
    )

    args = parser.parse_args(argv)

    if args.mode == "test":
        print("Running all tests...\n")
        sys.exit(run_tests())

    if args.request is not None:
        request = args.request.encode("utf-8")
    else:
        request = sys.stdin.buffer.read()

    trace_file = sys.stderr if args.trace else None
    envelope = run_query(args.config, request, trace_file=trace_file)
    sys.stdout.write(envelope.decode("utf-8") + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
