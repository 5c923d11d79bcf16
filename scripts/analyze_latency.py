#!/usr/bin/env python3
"""
analyze_latency.py

Latency 샘플 분석 CLI Tool

Usage:
    # 기술통계 + histogram
    python analyze_latency.py --input samples/order_latency.csv --column latency_ms

    # 요구사항 검증 (config/experiment_limits.yaml의 benchmark.requirements)
    python analyze_latency.py --input samples/order_latency.jsonl --column latency_ms --operation order_processing

    # Memory leak 의심 추세 분석
    python analyze_latency.py --input samples/heap.csv --column heap_mb --time-column t
"""

import sys
import argparse
import json
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from src.analysis import SampleStatistics, TrendAnalyzer, EngineError
from src.analysis.benchmark import latency_report, render_histogram
from src.analysis.sample_loader import load_samples, column_values, timed_samples
from src.infrastructure.config import load_experiment_config, ConfigValidationError

# Load environment variables (EXPERIMENT_CONFIG_PATH)
load_dotenv()


def main():
    parser = argparse.ArgumentParser(
        description='Latency Sample Analysis Tool',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--input', required=True, help='Sample file (.csv or .jsonl)')
    parser.add_argument('--column', required=True, help='Value column (e.g. latency_ms)')
    parser.add_argument('--time-column', help='Timestamp column for trend analysis')
    parser.add_argument('--operation', help='Operation name in benchmark.requirements')
    parser.add_argument('--config', help='Config path (default: EXPERIMENT_CONFIG_PATH or config/experiment_limits.yaml)')
    parser.add_argument('--format', choices=['text', 'json'], default='text', help='Output format (default: text)')
    parser.add_argument('--verbose', action='store_true', help='DEBUG logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_experiment_config(args.config)
        df = load_samples(Path(args.input))
        values = column_values(df, args.column)

        stats = SampleStatistics.compute(values)
        shape = SampleStatistics.shape(values)
        histogram = SampleStatistics.histogram(values)

        requirements = None
        if args.operation:
            requirements = config.benchmark.requirements.get(args.operation)
            if requirements is None:
                parser.error(f"Unknown operation in config: {args.operation}")

        report = latency_report(args.operation or args.column, stats, requirements)
        report["distribution"] = shape.classification

        if args.time_column:
            analyzer = TrendAnalyzer(config.trend.linear_growth_threshold)
            trend = analyzer.analyze_trend(timed_samples(df, args.time_column, args.column))
            report["trend"] = {
                "is_linear_growth": trend.is_linear_growth,
                "stability_score": trend.stability_score,
                "growth_rate": trend.growth_rate,
                "correlation": trend.correlation,
            }

    except (FileNotFoundError, ConfigValidationError, EngineError, ValueError) as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    if args.format == 'json':
        print(json.dumps(report, indent=2))
        return

    print(f"📊 {args.column} ({stats.count} samples)")
    print(f"  Mean: {stats.mean:.3f}  Median: {stats.median:.3f}  StdDev: {stats.std_dev:.3f}")
    print(f"  P50: {stats.p50:.3f}  P95: {stats.p95:.3f}  P99: {stats.p99:.3f}  P99.9: {stats.p999:.3f}")
    print(f"  Min: {stats.min:.3f}  Max: {stats.max:.3f}  Distribution: {shape.classification}")
    print()
    print(render_histogram(histogram))

    if args.operation:
        print(f"\n✅ Passed: {report['passed']}  Rating: {report['rating']}")
        for hint in report["recommendations"]:
            print(f"  - {hint}")

    if args.time_column:
        trend_report = report["trend"]
        flag = "⚠️ suspected leak" if trend_report["is_linear_growth"] else "stable"
        print(f"\n📈 Trend: {flag} (r={trend_report['correlation']:.3f}, "
              f"stability={trend_report['stability_score']:.3f})")


if __name__ == '__main__':
    main()
