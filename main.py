import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from calculator.config import CalculatorConfig
from client import TalentApiClient, TalentApiSession
from client.runtime import RuntimeTalentData, build_talent_data
from talents.converters.talent_api import NormalizerPolicy
from talents.fallback import load_fallback
from talents.parsers.talent_api.models import TalentApiPayload
from tooltip.template import TooltipTemplate

logger = logging.getLogger("talents")


def setup_logging(level: int = logging.INFO) -> None:
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]", handlers=[handler]
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build talent trees from the live talent database."
    )
    parser.add_argument("klass", help="Class to build, e.g. Mage")
    parser.add_argument(
        "--payload",
        type=Path,
        help="Read the API payload from a JSON file instead of fetching it",
    )
    parser.add_argument(
        "--url", help="Talent API endpoint (defaults to TALENT_API_URL)"
    )
    parser.add_argument(
        "--whitelist",
        action="store_true",
        help="Keep only talents known to the bundled dataset",
    )
    parser.add_argument(
        "--rank", type=int, default=1, help="Rank to render tooltips for"
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    policy = NormalizerPolicy.LIVE
    if args.whitelist:
        policy = NormalizerPolicy.STATIC_WHITELIST

    if args.payload:
        raw = args.payload.read_text(encoding="utf-8")
        payload = TalentApiPayload.model_validate_json(raw)
        if payload.error:
            logger.error("Payload carries an error: %s", payload.error)
            return 1
        static_data = load_fallback(args.klass)
        data = build_talent_data(payload, args.klass, static_data, policy)
    else:
        config = CalculatorConfig.from_env()
        if args.url:
            config = config.model_copy(update={"talent_api_url": args.url})
        session = TalentApiSession(TalentApiClient.from_config(config))
        state = session.select(args.klass)
        result = RuntimeTalentData(session, policy=policy).current()
        if state.error:
            logger.error(
                "Using bundled talents, live data unavailable: %s", state.error
            )
        data = result.data

    template = TooltipTemplate()
    for tree in data.values():
        print(f"== {tree.name} ({len(tree.talents)} talents)")
        for talent in tree.talents.values():
            tooltip = template.render_talent(tree, talent, args.rank)
            print(f"[{talent.pos}] " + tooltip.replace("\n", "\n     "))
            print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
