"""
general_plotting_info.py
========================
Shared matplotlib styling for the hadron gas EOS and resonance plots.

This module provides:
1. Serif font setup matching LaTeX documents
2. Figure size presets for single and multi-panel plots
3. A Mathematica-like color palette cycled over curves
4. Axis labels in GeV units
5. Helpers for panel labels, axis styling and saving

Usage:
    from general_plotting_info import (
        set_global_style, setup_scientific_figure, apply_style, LABELS
    )

    set_global_style()
    fig, axes = setup_scientific_figure(nrows=2, ncols=2)
    add_panel_labels(axes)
"""
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

# =============================================================================
# FONTS AND SIZES
# =============================================================================
FONTS = {
    'family': 'serif',
    'serif': ['CMU Serif', 'DejaVu Serif'],
    'mathtext': 'cm',
    'title': 13,
    'label': 12,
    'tick': 10,
    'legend': 10,
    'panel_label': 13,
}

STYLE = {
    'dpi': 150,
    'linewidth': 1.8,
    'grid_alpha': 0.3,
    'grid_linewidth': 0.5,
    'background': '#f0f0f0',
}

# (nrows, ncols) -> figsize in inches
FIGSIZES = {
    (1, 1): (6, 5),
    (1, 2): (10, 4.5),
    (2, 1): (5, 9),
    (2, 2): (9, 8),
}
DEFAULT_FIGSIZE = (8, 6)

# =============================================================================
# COLORS
# =============================================================================
STANDARD_COLORS = {
    'Red': (0.8, 0.25, 0.33),
    'Green': (0.24, 0.6, 0.44),
    'Blue': (0.24, 0.6, 0.8),
    'Gray': (0.4, 0.4, 0.4),
    'Purple': (0.5, 0.35, 0.65),
    'Orange': (0.9, 0.4, 0.0),
}

COLORS_SEQ = [
    STANDARD_COLORS['Blue'],
    STANDARD_COLORS['Red'],
    STANDARD_COLORS['Green'],
    STANDARD_COLORS['Purple'],
    STANDARD_COLORS['Orange'],
    STANDARD_COLORS['Gray'],
]

# =============================================================================
# LABELS
# =============================================================================
LABELS = {
    'e': r'$\varepsilon$ [GeV fm$^{-3}$]',
    'n_B': r'$n_B$ [fm$^{-3}$]',
    'P': r'$P$ [GeV fm$^{-3}$]',
    'T': r'$T$ [GeV]',
    'mu_B': r'$\mu_B$ [GeV]',
    'mu_S': r'$\mu_S$ [GeV]',
    'mass': r'$m$ [GeV]',
    'mass_pdf': r'$dN/dm$ [GeV$^{-1}$]',
    'sigma': r'$\sigma$ [mb]',
    'sqrts': r'$\sqrt{s}$ [GeV]',
}


# =============================================================================
# STYLE FUNCTIONS
# =============================================================================
def set_global_style():
    """Serif fonts, Computer Modern math and the sizes of FONTS."""
    plt.rcParams.update({
        'font.family': FONTS['family'],
        'font.serif': FONTS['serif'],
        'font.size': FONTS['label'],
        'mathtext.fontset': FONTS['mathtext'],
        'axes.labelsize': FONTS['label'],
        'axes.titlesize': FONTS['title'],
        'axes.formatter.use_mathtext': True,
        'xtick.labelsize': FONTS['tick'],
        'ytick.labelsize': FONTS['tick'],
        'legend.fontsize': FONTS['legend'],
        'figure.dpi': STYLE['dpi'],
        'savefig.dpi': STYLE['dpi'],
        'savefig.bbox': 'tight',
    })


def setup_scientific_figure(nrows=1, ncols=1, figsize=None, gray_background=False):
    """
    Create a figure with a preset size for its panel layout.

    Returns:
        fig, axes (a single Axes for 1x1, else an array)
    """
    if figsize is None:
        figsize = FIGSIZES.get((nrows, ncols), DEFAULT_FIGSIZE)
    fig, axes = plt.subplots(nrows, ncols, figsize=figsize, dpi=STYLE['dpi'])
    if gray_background:
        for ax in np.atleast_1d(axes).flat:
            ax.set_facecolor(STYLE['background'])
    return fig, axes


def add_panel_labels(axes, labels=None):
    """Label panels (a), (b), ... in their upper left corner."""
    axes_flat = list(np.atleast_1d(axes).flat)
    if labels is None:
        labels = [f'({chr(ord("a") + i)})' for i in range(len(axes_flat))]
    for ax, label in zip(axes_flat, labels):
        ax.text(0.04, 0.96, label, transform=ax.transAxes,
                fontsize=FONTS['panel_label'], fontweight='bold',
                ha='left', va='top')


def apply_style(ax, grid=True, legend=True):
    """Tick sizes, light grid and a legend if the axis has labelled artists."""
    ax.tick_params(labelsize=FONTS['tick'])
    if grid:
        ax.grid(True, alpha=STYLE['grid_alpha'], linewidth=STYLE['grid_linewidth'])
    if legend:
        handles, _ = ax.get_legend_handles_labels()
        if handles:
            ax.legend(fontsize=FONTS['legend'], framealpha=0.9)


def save_figure(fig, filename, formats=('png', 'pdf')):
    """Save `fig` as filename.<fmt> for every format, creating the directory."""
    Path(filename).parent.mkdir(parents=True, exist_ok=True)
    for fmt in formats:
        fig.savefig(f'{filename}.{fmt}', dpi=STYLE['dpi'],
                    bbox_inches='tight', facecolor='white')
    print(f"Saved: {filename}.{{{', '.join(formats)}}}")
