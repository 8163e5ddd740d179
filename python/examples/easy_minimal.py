#!/usr/bin/env python3
"""The simplest gnuplotter example. One call writes minimal.png.

Usage:
    python examples/easy_minimal.py
"""
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import gnuplotter as gp

gp.plot(data=[1, 4, 9, 16, 25, 36, 49, 64, 81, 100], filename="minimal.png").result()
