#!/usr/bin/env python3
"""Sparse, time-keyed series with smoothing, rendered to PDF.

Usage:
    python examples/time_series.py            # writes time_series.pdf
    python examples/time_series.py --script   # print the gnuplot script only

Needs gnuplot and ps2pdf on PATH (or GNUPLOTTER_GNUPLOT / GNUPLOTTER_PS2PDF).
"""

import math
import os
import sys
import time

# Allow running from repo root without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import gnuplotter as gp

start = int(time.time()) - 6 * 3600
step = 300  # seconds

cpu = {start + i * step: 50 + 30 * math.sin(i / 6.0) for i in range(72)}
mem = {start + i * step: 40 + i * 0.5 for i in range(72)}

request = gp.PlotRequest(
    data={"cpu %": cpu, "mem %": mem},
    filename="time_series.pdf",
    format="pdf",
    time="hours",
    title="Host load",
    ylabel="percent",
    y_range=gp.Range(0, 100),
    moving_avg=4,
)

if "--script" in sys.argv:
    sys.stdout.write(gp.render_script(request))
    sys.exit(0)


def done(error, stdout, stderr):
    if error is not None:
        print(f"plot failed: {error}", file=sys.stderr)
    else:
        print("wrote time_series.pdf")


gp.plot(request, finish=done)
