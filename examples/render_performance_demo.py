"""
Performance demonstration for the render pipeline.

Times a full render (every preset), a histogram scan and a JPEG export on
synthetic images of increasing size, then writes one export per preset to
an output directory so the looks can be compared side by side.

Usage:
    python examples/render_performance_demo.py [output_dir]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import time
from PIL import Image

from OD_Libs.ImageEditingLib import SourceImage, get_filter_presets
from OD_Libs.SessionLib import EditSession


def make_gradient(size):
    """Build a colorful test image so every stage has something to change."""
    gradient = Image.linear_gradient("L").resize((size, size))
    return Image.merge("RGB", (gradient, gradient.rotate(90), gradient.rotate(180)))


def benchmark_session(size, iterations=3):
    """Benchmark render, histogram and export on a size x size image."""
    print(f"\nBenchmarking {size}x{size} image")
    print("-" * 60)

    session = EditSession()
    session.load_image(SourceImage.from_image(make_gradient(size), name="gradient.png"))

    render_times = []
    for i in range(iterations):
        start = time.time()
        for preset in get_filter_presets():
            session.apply_preset(preset)
        elapsed = (time.time() - start) / len(get_filter_presets())
        render_times.append(elapsed)
        label = " (warmup)" if i == 0 else ""
        print(f"  Preset render run {i+1}: {elapsed:.3f}s per render{label}")

    start = time.time()
    histogram = session.histogram()
    histogram_time = time.time() - start
    print(f"  Histogram over {histogram.total()} pixels: {histogram_time:.3f}s")

    start = time.time()
    encoded = session.export()
    export_time = time.time() - start
    print(f"  JPEG export ({len(encoded.data)} bytes): {export_time:.3f}s")

    avg_render = sum(render_times[1:]) / len(render_times[1:])
    return avg_render, histogram_time, export_time


def export_presets(output_dir):
    """Write one PNG per preset into output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)
    session = EditSession()
    session.load_image(SourceImage.from_image(make_gradient(512), name="gradient.png"))
    session.update_download_settings(format="png")

    for preset in get_filter_presets():
        session.reset()
        session.apply_preset(preset)
        session.update_download_settings(filename=f"gradient-{preset.id}")
        path = session.save(output_dir)
        print(f"  {preset.name:<14} -> {path}")


def main():
    """Run performance benchmarks."""
    print("=" * 60)
    print("Render Pipeline Performance Demonstration")
    print("=" * 60)

    results = []
    for size in (256, 512, 1024):
        try:
            results.append((size,) + benchmark_session(size))
        except KeyboardInterrupt:
            print("\n\nBenchmark interrupted by user")
            break

    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    print("\nSize        Render    Histogram  Export")
    print("-" * 60)
    for size, avg_render, histogram_time, export_time in results:
        print(f"{size:4d}x{size:<4d}  {avg_render:6.3f}s  {histogram_time:6.3f}s    {export_time:6.3f}s")

    if len(sys.argv) > 1:
        print("\nExporting presets...")
        export_presets(Path(sys.argv[1]))

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
