"""
plotting.py – Atmosphere profile plots.
"""

from __future__ import annotations
import numpy as np
import matplotlib.pyplot as plt

_UNITS = {
    'density': 'kg/m³',
    'pressure': 'Pa',
    'temperature': 'K',
    'gas_constant': 'J/(kg·K)',
    'specific_heat_ratio': '–',
    'molar_mass': 'kg/mol',
    'speed_of_sound': 'm/s',
}

_COLORS = ['#1a73e8', '#0d652d', '#e8710a', '#d93025', '#9334e6', '#5f6368']


def plot_profiles(profile: dict, *, show: bool = True,
                  save_path: str | None = None,
                  log_scale: tuple[str, ...] = ('density', 'pressure'),
                  title: str = 'Tabulated Atmosphere') -> plt.Figure:
    """
    One panel per sampled quantity, altitude [km] on the vertical axis.

    Parameters
    ----------
    profile   : dict returned by ``sample_profile``
    show      : call plt.show()
    save_path : if given, save to file
    log_scale : quantities drawn on a logarithmic x-axis

    Returns
    -------
    matplotlib Figure
    """
    h_km = np.asarray(profile['altitude']) / 1000.0
    names = [k for k in profile if k != 'altitude']
    if not names:
        raise ValueError("Profile holds no quantities to plot")

    fig, axes = plt.subplots(1, len(names), figsize=(4 * len(names), 6),
                             sharey=True, squeeze=False)
    axes = axes[0]

    for i, (ax, name) in enumerate(zip(axes, names)):
        values = np.asarray(profile[name])
        ax.plot(values, h_km, color=_COLORS[i % len(_COLORS)], lw=2)
        if name in log_scale and np.all(values > 0):
            ax.set_xscale('log')
        label = name.replace('_', ' ').capitalize()
        ax.set_xlabel(f"{label} [{_UNITS.get(name, '-')}]")
        ax.grid(True, ls=':', alpha=0.4)

    axes[0].set_ylabel('Altitude [km]')
    fig.suptitle(title, fontsize=13, fontweight='bold')
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=200, bbox_inches='tight')
    if show:
        plt.show()
    return fig
