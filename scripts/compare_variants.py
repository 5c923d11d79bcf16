#!/usr/bin/env python3
"""
compare_variants.py

Variant A/B 비교 CLI Tool

Usage:
    # Welch t-test + Bayesian 승률 비교 + 추천
    python compare_variants.py --input-a returns_a.csv --input-b returns_b.csv --column return

    # Sequential test replay (batch 단위 누적 분석)
    python compare_variants.py --input-a returns_a.csv --input-b returns_b.csv --column return --sequential --batch-size 10
"""

import sys
import argparse
import logging
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from src.analysis import (
    VariantComparator,
    SequentialTestController,
    EngineError,
)
from src.analysis.sample_loader import load_samples, column_values
from src.infrastructure.config import load_experiment_config, ConfigValidationError
from src.infrastructure.logging.experiment_logger import log_sequential_decision

# Load environment variables (EXPERIMENT_CONFIG_PATH)
load_dotenv()


def run_sequential(values_a, values_b, controller, batch_size, experiment_id):
    """
    누적 샘플 replay → 최종 state (마지막 부분 batch 포함)

    Returns:
        SequentialTestState: 마지막 상태 (terminal 또는 데이터 소진)
    """
    return controller.replay(
        values_a,
        values_b,
        batch_size,
        on_result=lambda result: log_sequential_decision(time.time(), experiment_id, result),
    )


def main():
    parser = argparse.ArgumentParser(
        description='Variant A/B Comparison Tool',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--input-a', required=True, help='Variant A sample file (.csv or .jsonl)')
    parser.add_argument('--input-b', required=True, help='Variant B sample file (.csv or .jsonl)')
    parser.add_argument('--column', default='return', help='Value column (default: return)')
    parser.add_argument('--sequential', action='store_true', help='Sequential test replay mode')
    parser.add_argument('--batch-size', type=int, default=10, help='Sequential batch size (default: 10)')
    parser.add_argument('--experiment-id', default='cli', help='Experiment id for logs')
    parser.add_argument('--config', help='Config path (default: EXPERIMENT_CONFIG_PATH or config/experiment_limits.yaml)')

    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.batch_size < 2:
        parser.error("--batch-size must be at least 2")

    try:
        config = load_experiment_config(args.config)
        values_a = column_values(load_samples(Path(args.input_a)), args.column)
        values_b = column_values(load_samples(Path(args.input_b)), args.column)

        if args.sequential:
            controller = SequentialTestController(config.sequential.to_config())
            state = run_sequential(values_a, values_b, controller, args.batch_size, args.experiment_id)
            print(f"🔁 Sequential test: {state.decision.value} after {state.batches} batches "
                  f"(n={state.samples_a}, p={state.last_p_value})")
            return

        result = VariantComparator(config.bayesian.confidence).compare(values_a, values_b)

    except (FileNotFoundError, ConfigValidationError, EngineError, ValueError) as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    print("🔍 A/B Comparison")
    print(f"  A: n={result.stats_a.count} mean={result.stats_a.mean:.6f}")
    print(f"  B: n={result.stats_b.count} mean={result.stats_b.mean:.6f}")
    print(f"  t={result.t_test.t_statistic:.3f} p={result.t_test.p_value:.4f} "
          f"effect={result.t_test.effect_size:.3f}")
    print(f"  P(B>A) winrate: {result.bayesian.probability_b_beats_a:.3f}")
    print(f"\n✅ Recommendation: {result.recommendation}")
    print(f"  {result.reasoning}")


if __name__ == '__main__':
    main()
