import json
import logging
import os

import numpy as np

logger = logging.getLogger(__name__)


def load_dataset(path):
    """
    Load rx.npy (complex baseband samples) and meta.json from a dataset folder.
    Returns:
        rx   : numpy array of complex samples
        meta : dictionary with metadata (sample rate, true offset, etc.), empty if absent
    """
    rx_path = os.path.join(path, "rx.npy")
    meta_path = os.path.join(path, "meta.json")

    rx = np.load(rx_path)  # complex samples
    meta = {}
    if os.path.exists(meta_path):
        with open(meta_path, "r") as f:
            meta = json.load(f)
    else:
        logger.debug("No meta.json in %s", path)

    return rx, meta


def save_results(path, corrected, freq_trace, summary=None):
    """
    Save corrected.npy, freq_trace.npy and (optionally) sync_result.json
    in the same folder.
    """
    np.save(os.path.join(path, "corrected.npy"), np.asarray(corrected))
    np.save(os.path.join(path, "freq_trace.npy"), np.asarray(freq_trace, dtype=np.float64))
    if summary is not None:
        with open(os.path.join(path, "sync_result.json"), "w") as f:
            json.dump(summary, f, indent=2)
    logger.info("Saved %d corrected samples to %s", len(corrected), path)
