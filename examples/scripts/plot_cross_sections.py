"""
Ionisation Cross-Sections - Plotting Example

Plots total ionisation cross-sections for every model and target, and
the single- and double-differential cross-sections of H at 100 eV.

This example shows:
    - Rudd 1991 vs Kim-Rudd 1994 total cross-sections
    - Energy-transfer spectrum dσ/dW over the sampling domain
    - Binary-encounter peak in d²σ/(dW dΩ)

Expected results:
    - Kim-Rudd H peaks near 0.6e-16 cm² around 50-70 eV
    - Rudd H at 100 eV: ~9.33e-17 cm²
"""

import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from inelastic_mc import CalcType, InelasticScatter, Species, create_cross_section_model


def plot_total_cross_sections(energies=None, save_path=None):
    """
    Total cross-section vs incident energy for all model/target pairs.

    Parameters:
        energies: Incident energies [eV] (default: 30 eV - 10 keV, log-spaced)
        save_path: Path to save figure (optional)
    """
    if energies is None:
        energies = np.logspace(np.log10(30.0), 4, 200)

    plt.figure(figsize=(10, 6))
    styles = {CalcType.RUDD1991: '--', CalcType.KIM1994: '-'}
    colors = {Species.H: 'blue', Species.HE: 'red', Species.H2: 'green'}

    for calc in CalcType:
        for spec in Species:
            model = create_cross_section_model(calc, spec)
            sigma = np.array([model.total_cross_section(E) for E in energies])
            plt.loglog(energies, sigma * 1e4, styles[calc], color=colors[spec],
                       linewidth=2, label=f'{calc.value} {spec.value}')

    plt.xlabel('Incident Energy [eV]', fontsize=14, fontweight='bold')
    plt.ylabel('σ [cm²]', fontsize=14, fontweight='bold')
    plt.title('Total Ionisation Cross-Sections', fontsize=16, fontweight='bold')
    plt.grid(True, alpha=0.3, linestyle='--', which='both')
    plt.legend(fontsize=11)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Figure saved: {save_path}")

    return plt.gcf()


def plot_differential_cross_sections(energy_eV: float = 100.0, save_path=None):
    """
    dσ/dW for both models and the Rudd d²σ/(dW dΩ) at a few W for H.

    Parameters:
        energy_eV: Incident energy [eV]
        save_path: Path to save figure (optional)
    """
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    for calc in CalcType:
        scatter = InelasticScatter(0.0, calc, Species.H, incident_energy=energy_eV)
        lo, hi = scatter.model.energy_transfer_domain(energy_eV)
        W = np.linspace(lo, hi, 400)[1:-1]
        ax1.plot(W, scatter.model.single_diff_table(W, energy_eV) * 1e4,
                 linewidth=2, label=calc.value)

    ax1.set_xlabel('W [eV]', fontsize=14, fontweight='bold')
    ax1.set_ylabel('dσ/dW [cm²/eV]', fontsize=14, fontweight='bold')
    ax1.set_title(f'H, E = {energy_eV:.0f} eV', fontsize=16, fontweight='bold')
    ax1.grid(True, alpha=0.3, linestyle='--')
    ax1.legend(fontsize=12)

    rudd = InelasticScatter(0.0, CalcType.RUDD1991, Species.H, incident_energy=energy_eV)
    theta = np.linspace(0.0, np.pi, 361)
    lo, hi = rudd.model.energy_transfer_domain(energy_eV)
    for W in np.linspace(lo, hi, 5)[1:-1]:
        ddcs = rudd.model.double_diff_table(W, theta, energy_eV)
        ax2.plot(np.degrees(theta), ddcs * 1e4, linewidth=2, label=f'W = {W:.1f} eV')

    ax2.set_xlabel('θ [deg]', fontsize=14, fontweight='bold')
    ax2.set_ylabel('d²σ/(dW dΩ) [cm²/eV/sr]', fontsize=14, fontweight='bold')
    ax2.set_title('Rudd 1991 angular distribution', fontsize=16, fontweight='bold')
    ax2.grid(True, alpha=0.3, linestyle='--')
    ax2.legend(fontsize=12)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')
        print(f"Figure saved: {save_path}")

    return fig


def print_cross_section_table(energies=(30.0, 100.0, 1000.0)):
    """Print total cross-sections for every model and target."""
    print(f"\n{'='*70}")
    print("Total Ionisation Cross-Sections [cm²]")
    print(f"{'='*70}")
    print(f"  {'model':9s} {'target':6s} " + " ".join(f"{E:>11.0f} eV" for E in energies))

    for calc in CalcType:
        for spec in Species:
            model = create_cross_section_model(calc, spec)
            values = " ".join(f"{model.total_cross_section(E)*1e4:14.4e}" for E in energies)
            print(f"  {calc.value:9s} {spec.value:6s} {values}")
    print(f"{'='*70}\n")


# ============================================================================
# Main Execution
# ============================================================================

if __name__ == "__main__":
    print_cross_section_table()

    plot_total_cross_sections(save_path='total_cross_sections.png')
    plt.show()

    plot_differential_cross_sections(100.0, save_path='differential_cross_sections_H_100eV.png')
    plt.show()

    print("\n" + "="*70)
    print("All plots complete!")
    print("="*70 + "\n")
