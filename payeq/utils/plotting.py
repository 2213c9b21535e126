# -*- coding: utf-8 -*-
"""
Utility functions for saving figures.
"""
import os

import matplotlib
matplotlib.use('Agg')  # no GUI windows on servers
import matplotlib.pyplot as plt


def save_matplotlib_figure(fig, base_filename, output_charts_dir):
    """Saves a Matplotlib figure to the designated charts directory."""
    os.makedirs(output_charts_dir, exist_ok=True)
    chart_path = os.path.join(output_charts_dir, f"{base_filename}.png")

    fig.savefig(chart_path, bbox_inches='tight', dpi=150)
    plt.close(fig)
    return chart_path
