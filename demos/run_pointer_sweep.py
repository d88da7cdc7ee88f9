#!/usr/bin/env python3
"""
RUN_POINTER_SWEEP: Drag the Pointer Field Around the Lattice
============================================================

This demo drives the frame loop the way an interactive viewer would:
1. Build a 20x20 lattice with every spin pointing up (+Z)
2. Move the pointer around a circle over the lattice, one step per frame
3. Record the mean magnetization after every frame
4. Plot the final spin state (quiver, colored by m_z) and the history
5. Export an interactive 3D view

Run with:
    python demos/run_pointer_sweep.py

Outputs:
    artifacts/pointer_sweep.png      - Final in-plane spin map + <m> history
    artifacts/pointer_sweep_3d.html  - Interactive 3D visualization
"""

import logging
import numpy as np
import sys
import os
from pathlib import Path
import matplotlib.pyplot as plt
from tqdm import tqdm

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from spinfield import FrameDriver, SimulationParams
from spinfield.post import compute_metrics, mean_magnetization
from spinfield.viz import plot_spin_lattice_3d

N_FRAMES = 600
FRAME_DELTA = 1 / 60
SWEEP_RADIUS = 2.5
SWEEP_TURNS = 2.0


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {text}")
    print("=" * 70)


def circle_path(n_frames: int, radius: float, turns: float) -> np.ndarray:
    """Pointer targets on the z=0 plane, one per frame."""
    theta = np.linspace(0.0, 2 * np.pi * turns, n_frames)
    return np.column_stack([radius * np.cos(theta), radius * np.sin(theta), np.zeros(n_frames)])


def plot_state(positions, directions, history, outpath: str):
    """In-plane quiver of the final state above the <m> history."""
    os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(8, 12))

    q = ax1.quiver(
        positions[:, 0], positions[:, 1],
        directions[:, 0], directions[:, 1],
        directions[:, 2],
        cmap='RdBu_r', clim=(-1, 1), pivot='middle',
    )
    fig.colorbar(q, ax=ax1, label='m_z')
    ax1.set_aspect('equal')
    ax1.set_title('Final spin state (in-plane components)')
    ax1.set_xlabel('x')
    ax1.set_ylabel('y')

    frames = np.arange(1, len(history) + 1)
    for k, label in enumerate(['<mx>', '<my>', '<mz>']):
        ax2.plot(frames, history[:, k], label=label)
    ax2.set_xlabel('frame')
    ax2.set_ylabel('mean magnetization')
    ax2.grid(True, alpha=0.3)
    ax2.legend()

    plt.tight_layout()
    fig.savefig(outpath, dpi=120)
    plt.close(fig)
    print(f"Figure saved to: {outpath}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    print_header("POINTER-DRIVEN SPIN LATTICE")

    # =========================================================================
    # STEP 1: PARAMETERS
    # =========================================================================
    print_header("STEP 1: Parameters")

    params = SimulationParams(is_field_inverted=True)
    print(f"""
    Grid:             {params.grid_size} x {params.grid_size}
    gamma:            {params.gamma:.1e}
    alpha:            {params.alpha}
    exchange:         {params.exchange_strength:.1e}
    pointer field:    {params.external_field_strength:.1e} (inverted={params.is_field_inverted})
    time-step scale:  {params.time_step_scale:.1e}
    """)

    # =========================================================================
    # STEP 2: RUN THE FRAME LOOP
    # =========================================================================
    print_header("STEP 2: Sweep")

    driver = FrameDriver(params)
    path = circle_path(N_FRAMES, SWEEP_RADIUS, SWEEP_TURNS)
    history = np.zeros((N_FRAMES, 3))

    for k in tqdm(range(N_FRAMES), desc="Frames"):
        result = driver.step(FRAME_DELTA, pointer=path[k])
        history[k] = mean_magnetization(result.directions)

    # =========================================================================
    # STEP 3: RESULTS
    # =========================================================================
    print_header("STEP 3: Results")

    metrics = compute_metrics(driver.directions, driver.lattice)
    mx, my, mz = metrics['mean_m']
    print(f"""
    Frames:              {driver.frame_count}
    <m>:                 ({mx:+.4f}, {my:+.4f}, {mz:+.4f})
    |<m>|:               {metrics['abs_mean_m']:.4f}
    Neighbor alignment:  {metrics['neighbor_alignment']:.4f}
    Max |m|-1 error:     {metrics['max_norm_error']:.2e}
    """)

    # =========================================================================
    # STEP 4: VISUALIZE
    # =========================================================================
    print_header("STEP 4: Visualization")

    artifacts = Path(__file__).parent.parent / "artifacts"
    plot_state(driver.positions, driver.directions, history, str(artifacts / "pointer_sweep.png"))
    plot_spin_lattice_3d(
        driver.positions,
        driver.directions,
        pointer=driver.pointer.position,
        outpath=str(artifacts / "pointer_sweep_3d.html"),
        show=False,
        title=f"Spin lattice after {driver.frame_count} frames",
    )


if __name__ == "__main__":
    main()
