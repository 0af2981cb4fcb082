"""
Command-line runner for the profiling engine.

Usage:
    python -m profiling.run --config configs/config.yaml --input messages.txt

The runner performs the following steps:
1. Load and validate configuration
2. Stream the input file through the engine, one message per line
3. Force a final deep analysis pass over anything still queued
4. Build relationship triples from the aggregate profile
5. Write the profile report and context variation table
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def run_profiling(
    config_path: str,
    input_path: str,
    output_dir: Optional[str] = None,
    session_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Profile every message in an input file.

    Args:
        config_path: Path to the configuration YAML file
        input_path: Text file with one message per line
        output_dir: If provided, write outputs here instead of config default
        session_id: Optional session id recorded with each context detection

    Returns:
        Dictionary with the report and output paths
    """
    from .configs import load_config, validate_config, get_config_value
    from .engine import ProfilingEngine

    logger.info("=" * 60)
    logger.info("TRAIT PROFILING")
    logger.info("=" * 60)

    config = load_config(config_path)
    issues = validate_config(config)
    if issues:
        for issue in issues:
            logger.warning(f"Config issue: {issue}")

    setup_logging(get_config_value(config, "global.log_level", "INFO"))

    out_dir = Path(output_dir or get_config_value(config, "global.output_dir", "artifacts"))
    out_dir.mkdir(parents=True, exist_ok=True)

    with open(input_path, "r", encoding="utf-8") as f:
        messages = [line.strip() for line in f if line.strip()]
    logger.info(f"Loaded {len(messages)} messages from {input_path}")

    with ProfilingEngine(config) as engine:
        # =====================================================================
        # 1. Stream messages
        # =====================================================================
        logger.info("\n" + "=" * 60)
        logger.info("STEP 1: Processing Messages")
        logger.info("=" * 60)

        for i, text in enumerate(messages):
            analysis = engine.process_message(text, message_id=f"msg-{i + 1}", session_id=session_id)
            logger.debug(
                f"msg-{i + 1}: {len(analysis.fused)} domains, "
                f"context={analysis.context.primary_context.value}"
            )

        # =====================================================================
        # 2. Final deep pass
        # =====================================================================
        logger.info("\n" + "=" * 60)
        logger.info("STEP 2: Final Deep Analysis")
        logger.info("=" * 60)

        engine.wait_for_deep_analysis()
        if engine.adapter is not None and engine.adapter.queue_size > 0:
            engine.run_deep_analysis()

        # =====================================================================
        # 3. Relationships and context variation
        # =====================================================================
        logger.info("\n" + "=" * 60)
        logger.info("STEP 3: Relationships and Context Variation")
        logger.info("=" * 60)

        triples = engine.build_relationships()
        logger.info(f"Built {len(triples)} relationship triples")

        variations = engine.analyze_context_variations()
        variations_path = out_dir / "context_variations.csv"
        engine.variance.to_frame(variations).to_csv(variations_path, index=False)
        logger.info(f"Saved {len(variations)} context variations to {variations_path}")

        for insight in engine.generate_context_insights():
            logger.info(f"Insight ({insight.domain_name}): {insight.insight}")

        # =====================================================================
        # 4. Report
        # =====================================================================
        report = engine.report()
        report_path = out_dir / "profile_report.json"
        report.save(str(report_path))

    logger.info("\n" + report.summary())

    logger.info("\n" + "=" * 60)
    logger.info("PROFILING COMPLETE")
    logger.info("=" * 60)

    return {
        "success": True,
        "messages_processed": len(messages),
        "report": str(report_path),
        "context_variations": str(variations_path),
    }


def main():
    """Main entry point for the profiling runner."""
    parser = argparse.ArgumentParser(
        description="Build a psychological trait profile from a message log"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Text file with one message per line"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory for reports (overrides config)"
    )
    parser.add_argument(
        "--session-id",
        type=str,
        default=None,
        help="Session id recorded with each message"
    )

    args = parser.parse_args()

    try:
        result = run_profiling(
            args.config, args.input, output_dir=args.output_dir, session_id=args.session_id
        )
        if result["success"]:
            logger.info("\nProfiling completed successfully!")
            return 0
        logger.error("\nProfiling failed!")
        return 1
    except Exception as e:
        logger.exception(f"Profiling failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
