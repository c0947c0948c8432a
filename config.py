class Config:
    """Configuration management for all signal profiles."""

    def __init__(self):
        self.dataset_base_path = "sync_dataset"

        # Profile-specific configurations
        self.profile_configs = {
            'tone': {
                'dataset_path': f"{self.dataset_base_path}/tone",
                'sample_rate': 8000.0,
                'modulation_order': 1,       # bare carrier, no nonlinearity
                'alpha': 0.132,
                'beta': 0.00932,
                'tolerance_bins': 1.0,       # |error| <= 1 FFT bin
            },
            'bpsk': {
                'dataset_path': f"{self.dataset_base_path}/bpsk",
                'sample_rate': 1e6,
                'samples_per_symbol': 8,
                'modulation_order': 2,       # squaring removes BPSK data
                'alpha': 0.132,
                'beta': 0.00932,
                'tolerance_bins': 1.0,
            },
            'qpsk': {
                'dataset_path': f"{self.dataset_base_path}/qpsk",
                'sample_rate': 1e6,
                'samples_per_symbol': 8,
                'modulation_order': 4,       # 4th power removes QPSK data
                'loop_bandwidth': 0.02,      # Costas gains derived from bandwidth
                'tolerance_bins': 1.0,
            },
        }

    def get_profile_config(self, name):
        """Get configuration for a specific profile."""
        return dict(self.profile_configs.get(name, {}))

    @property
    def profiles(self):
        return list(self.profile_configs)
