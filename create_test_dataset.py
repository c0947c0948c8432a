import json
from pathlib import Path

import numpy as np

from config import Config
from freqsync.utils import generate_test_signal


def create_test_dataset(base_path=None, num_samples=3, seed=0):
    """Create synthetic dataset for testing."""

    config = Config()
    base_path = Path(base_path or config.dataset_base_path)
    rng = np.random.default_rng(seed)

    cases = [
        ("tone", ["offset_1000hz", "offset_-1500hz"]),
        ("bpsk", ["offset_10khz_snr_20db", "offset_-25khz_snr_10db"]),
        ("qpsk", ["offset_5khz_snr_20db", "offset_-12khz_snr_15db"]),
    ]

    created = []
    for profile, case_names in cases:
        cfg = config.get_profile_config(profile)

        for case in case_names:
            parts = case.split("_")
            freq_offset = float(parts[1].replace("khz", "e3").replace("hz", ""))
            snr_db = float(parts[3].replace("db", "")) if len(parts) > 3 else None

            for sample_num in range(num_samples):
                sample_dir = base_path / profile / case / f"sample_{sample_num:03d}"
                sample_dir.mkdir(parents=True, exist_ok=True)

                data = generate_test_signal(
                    num_symbols=1024 if profile == "tone" else 512,
                    samples_per_symbol=cfg.get('samples_per_symbol', 1),
                    modulation_order=cfg['modulation_order'],
                    freq_offset=freq_offset,
                    sample_rate=cfg['sample_rate'],
                    phase_offset=rng.uniform(0, 2 * np.pi),
                    snr_db=snr_db,
                    rng=rng,
                )

                # Save rx.npy
                np.save(sample_dir / "rx.npy", data['rx_samples'].astype(np.complex64))

                # Save meta.json
                metadata = {
                    "profile": profile,
                    "sample_rate": cfg['sample_rate'],
                    "modulation_order": cfg['modulation_order'],
                    "freq_offset": freq_offset,
                    "snr": snr_db,
                }

                with open(sample_dir / "meta.json", 'w') as f:
                    json.dump(metadata, f, indent=2)

                print(f"Created {sample_dir}")
                created.append(sample_dir)

    return created


if __name__ == "__main__":
    create_test_dataset()
    print("Test dataset created!")
