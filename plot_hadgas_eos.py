"""
plot_hadgas_eos.py
==================
Script to plot the tabulated hadron gas EOS and resonance formation.

This script generates:
1. Maps of P, T, μ_B, μ_S over the (n_B, e) grid of the EOS table
2. T and μ_B along lines of fixed n_B
3. Resonance formation cross sections vs sqrt(s) for a colliding pair
4. Sampled resonance masses against their analytic distribution

Usage:
    python plot_hadgas_eos.py

Or import and call specific functions:
    from plot_hadgas_eos import load_eos_table, plot_table_maps
"""
import numpy as np
import matplotlib.pyplot as plt
import pandas as pd
from pathlib import Path

from general_plotting_info import (
    set_global_style, setup_scientific_figure, add_panel_labels, apply_style,
    FONTS, STYLE, LABELS, COLORS_SEQ, save_figure
)
from general_kinematics import ParticleData
from general_particles import ParticleCatalog, get_light_hadron_catalog
from resonances_cross_sections import resonance_cross_section, quadrature_1d
from resonances_sampling import mass_distribution, sample_resonance_masses

# =============================================================================
# CONSTANTS
# =============================================================================
COLUMNS = ['P', 'T', 'mu_B', 'mu_S']
MAP_QUANTITIES = ['P', 'T', 'mu_B', 'mu_S']


# =============================================================================
# DATA LOADING
# =============================================================================
def load_eos_table(filepath):
    """
    Load an EOS table cache file.

    Parameters:
        filepath: Path to the table written by EosTable.save

    Returns:
        pandas DataFrame with columns e, n_B, P, T, mu_B, mu_S
    """
    with open(filepath, 'r') as f:
        de, dnb = (float(v) for v in f.readline().split())
        n_e, n_nb = (int(v) for v in f.readline().split())
    data = pd.read_csv(filepath, sep=r'\s+', skiprows=2, names=COLUMNS)
    if len(data) != n_e * n_nb:
        raise ValueError(f"{filepath}: {len(data)} rows, expected {n_e * n_nb}")
    index = np.arange(len(data))
    data['e'] = de * (index // n_nb)
    data['n_B'] = dnb * (index % n_nb)
    return data


def filter_data(df, n_B=None, e=None, solved_only=True):
    """Select rows at the grid line nearest to n_B and/or e."""
    mask = pd.Series(True, index=df.index)
    if n_B is not None:
        values = df['n_B'].unique()
        mask &= np.isclose(df['n_B'], values[np.argmin(np.abs(values - n_B))])
    if e is not None:
        values = df['e'].unique()
        mask &= np.isclose(df['e'], values[np.argmin(np.abs(values - e))])
    if solved_only:
        mask &= df['T'] > 0.0
    return df[mask].sort_values(['e', 'n_B'])


# =============================================================================
# EOS PLOTS
# =============================================================================
def plot_table_maps(df, save_path=None):
    """Plot P, T, μ_B, μ_S over the (n_B, e) plane in a 4-panel figure."""
    fig, axes = setup_scientific_figure(2, 2)

    for ax, quantity in zip(axes.flat, MAP_QUANTITIES):
        grid = df.pivot(index='e', columns='n_B', values=quantity)
        mesh = ax.pcolormesh(grid.columns.values, grid.index.values, grid.values,
                             shading='auto', cmap='viridis')
        fig.colorbar(mesh, ax=ax, label=LABELS[quantity])
        ax.set_xlabel(LABELS['n_B'], fontsize=FONTS['label'])
        ax.set_ylabel(LABELS['e'], fontsize=FONTS['label'])
        apply_style(ax, grid=False, legend=False)

    add_panel_labels(axes)
    plt.tight_layout()

    if save_path:
        save_figure(fig, save_path)

    return fig, axes


def plot_isochores(df, n_B_values=(0.0, 0.05, 0.1), save_path=None):
    """Plot T(e) and μ_B(e) at fixed n_B."""
    fig, axes = setup_scientific_figure(1, 2)

    for color, n_B in zip(COLORS_SEQ, n_B_values):
        data = filter_data(df, n_B=n_B)
        if data.empty:
            continue
        label = f'$n_B = {data["n_B"].iloc[0]:.3f}$ fm$^{{-3}}$'
        axes[0].plot(data['e'], data['T'], color=color,
                     linewidth=STYLE['linewidth'], label=label)
        axes[1].plot(data['e'], data['mu_B'], color=color,
                     linewidth=STYLE['linewidth'], label=label)

    for ax, quantity in zip(axes, ['T', 'mu_B']):
        ax.set_xlabel(LABELS['e'], fontsize=FONTS['label'])
        ax.set_ylabel(LABELS[quantity], fontsize=FONTS['label'])
        apply_style(ax)

    plt.tight_layout()

    if save_path:
        save_figure(fig, save_path)

    return fig, axes


# =============================================================================
# RESONANCE PLOTS
# =============================================================================
def colliding_pair(catalog: ParticleCatalog, pdg1: int, pdg2: int, sqrts: float):
    """Two on-shell particles colliding head-on along z in their CM frame."""
    type1, type2 = catalog.find(pdg1), catalog.find(pdg2)
    s = sqrts * sqrts
    m_sum, m_diff = type1.mass + type2.mass, type1.mass - type2.mass
    p_cm = np.sqrt(max((s - m_sum * m_sum) * (s - m_diff * m_diff), 0.0)) / (2.0 * sqrts)
    return (ParticleData.with_three_momentum(type1, [0.0, 0.0, p_cm]),
            ParticleData.with_three_momentum(type2, [0.0, 0.0, -p_cm]))


def plot_formation_cross_sections(catalog, pdg1, pdg2, sqrts_values, save_path=None):
    """
    Plot resonance formation cross sections of a pair vs sqrt(s).

    Returns:
        fig, ax, {final state: array of σ in mb}
    """
    sqrts_values = np.asarray(sqrts_values)
    curves = {}
    for i, sqrts in enumerate(sqrts_values):
        particle1, particle2 = colliding_pair(catalog, pdg1, pdg2, sqrts)
        for branch in resonance_cross_section(particle1, particle2, catalog):
            name = " + ".join(catalog.find(pdg).name for pdg in branch.pdg_list)
            curves.setdefault(name, np.zeros(len(sqrts_values)))[i] += branch.weight

    fig, ax = setup_scientific_figure(1, 1)
    for color, (name, xsection) in zip(COLORS_SEQ * 4, sorted(curves.items())):
        ax.plot(sqrts_values, xsection, color=color,
                linewidth=STYLE['linewidth'], label=name)
    ax.set_xlabel(LABELS['sqrts'], fontsize=FONTS['label'])
    ax.set_ylabel(LABELS['sigma'], fontsize=FONTS['label'])
    ax.set_title(f'{catalog.find(pdg1).name} + {catalog.find(pdg2).name}',
                 fontsize=FONTS['title'])
    apply_style(ax)

    if save_path:
        save_figure(fig, save_path)

    return fig, ax, curves


def plot_resonance_mass_distribution(catalog, pdg_resonance, pdg_stable, cms_energy,
                                     n_samples=10000, bins=40, rng=None, save_path=None):
    """
    Histogram of sampled resonance masses with the normalized analytic shape.

    Returns:
        fig, ax, sampled masses
    """
    if rng is None:
        rng = np.random.default_rng()
    resonance = catalog.find(pdg_resonance)
    stable = catalog.find(pdg_stable)
    distribution, m_min, m_max = mass_distribution(catalog, pdg_resonance,
                                                   pdg_stable, cms_energy)

    masses = sample_resonance_masses(catalog, pdg_resonance, pdg_stable,
                                     cms_energy, n_samples, rng)

    norm, _ = quadrature_1d(distribution, m_min, m_max)
    m_grid = np.linspace(m_min, m_max, 400)
    pdf = distribution(m_grid) / norm

    fig, ax = setup_scientific_figure(1, 1)
    ax.hist(masses, bins=bins, range=(m_min, m_max), density=True,
            color=COLORS_SEQ[0], alpha=0.6, label=f'{n_samples} samples')
    ax.plot(m_grid, pdf, color=COLORS_SEQ[1], linewidth=STYLE['linewidth'],
            label='analytic')
    ax.set_xlabel(LABELS['mass'], fontsize=FONTS['label'])
    ax.set_ylabel(LABELS['mass_pdf'], fontsize=FONTS['label'])
    ax.set_title(rf'{resonance.name} + {stable.name}, $\sqrt{{s}} = {cms_energy}$ GeV',
                 fontsize=FONTS['title'])
    apply_style(ax)

    if save_path:
        save_figure(fig, save_path)

    return fig, ax, masses


# =============================================================================
# MAIN EXECUTION
# =============================================================================
def main():
    """Generate all plots."""
    set_global_style()
    output_dir = Path('hadgas_plots')
    catalog = get_light_hadron_catalog()

    table_file = Path('hadgas_eos_table.dat')
    if table_file.exists():
        print(f"Loading EOS table {table_file}...")
        df = load_eos_table(table_file)
        print(f"Loaded: {len(df)} points, {int((df['T'] > 0).sum())} solved")
        print("Generating EOS maps...")
        plot_table_maps(df, save_path=str(output_dir / 'eos_table_maps'))
        plot_isochores(df, save_path=str(output_dir / 'eos_isochores'))
    else:
        print(f"{table_file} not found, run hadgas_compute_tables.py first")

    print("Generating cross section plots...")
    plot_formation_cross_sections(catalog, 211, -211, np.linspace(0.3, 1.5, 121),
                                  save_path=str(output_dir / 'xs_pi_pi'))
    plot_formation_cross_sections(catalog, 2212, 2212, np.linspace(2.0, 3.5, 61),
                                  save_path=str(output_dir / 'xs_p_p'))

    print("Sampling resonance masses...")
    plot_resonance_mass_distribution(catalog, 2214, 2212, 2.5,
                                     rng=np.random.default_rng(1),
                                     save_path=str(output_dir / 'delta_mass'))

    print(f"\nPlots saved to {output_dir}/")
    plt.show()


if __name__ == '__main__':
    main()
