#!/usr/bin/env python
"""
Plot the training loss of a sigmoid layer fit to a planted sigmoid layer.

Writes figures/loss_curve.png. Deterministic (seed=0).
"""

from pathlib import Path

import matplotlib.pyplot as plt

from neural_layer import configure_logging, make_synthetic, train_layer


# Configuration
SEED = 0
N_IN = 8
N_OUT = 3
N_SAMPLES = 64
EPOCHS = 200
ETA = 0.5

FIGURES_DIR = Path(__file__).parent.parent / "figures"
FIGURES_DIR.mkdir(exist_ok=True)


def main():
    configure_logging()
    print(f"Configuration: n_in={N_IN}, n_out={N_OUT}, samples={N_SAMPLES}, epochs={EPOCHS}, eta={ETA}")

    X, Y, _ = make_synthetic(N_IN, N_OUT, n_samples=N_SAMPLES, seed=SEED)
    history, _ = train_layer(X, Y, epochs=EPOCHS, eta=ETA, seed=SEED)
    print(f"  Loss: {history['loss'][0]:.6f} -> {history['loss'][-1]:.6f}")

    plt.figure(figsize=(6.5, 4.0))
    plt.plot(history['loss'])
    plt.xlabel("Epoch")
    plt.ylabel("Mean squared error")
    plt.yscale("log")
    plt.title("Single sigmoid layer: training loss")
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    out = FIGURES_DIR / "loss_curve.png"
    plt.savefig(out, dpi=200)
    print(f"Wrote {out}")


if __name__ == "__main__":
    main()
