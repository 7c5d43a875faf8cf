import yaml


class TimingConfig:
    """
    Fixed stall penalties of the pipeline model.

    The availability-based hazard pushes are derived from stage cycles; these two
    penalties are not, so they are kept configurable.
    """

    defaults = {
        # extra cycles when two memory operations are back to back
        'memory_busy_penalty': 1,
        # extra cycles when an ADD/SUB reads the result of the ADD/SUB just before it
        'dependent_alu_penalty': 2,
    }

    def __init__(self, **overrides):
        unknown = set(overrides) - set(self.defaults)
        if unknown:
            raise ValueError(f"Unknown timing keys: {sorted(unknown)}")

        penalties = {**self.defaults, **overrides}
        for key, value in penalties.items():
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{key} must be a non-negative integer, got {value!r}")

        self.memory_busy_penalty = penalties['memory_busy_penalty']
        self.dependent_alu_penalty = penalties['dependent_alu_penalty']

    @classmethod
    def from_yaml(cls, config_path: str):
        with open(config_path, 'r') as file:
            config = yaml.safe_load(file) or {}

        timing_config = config.get('timing_config') or {}
        if not isinstance(timing_config, dict):
            raise ValueError(f"timing_config in {config_path} must be a mapping")
        return cls(**timing_config)

    def as_dict(self):
        return {key: getattr(self, key) for key in self.defaults}

    def __repr__(self):
        return f"TimingConfig({self.as_dict()})"
