import yaml

CONFIG_PATH = "config/config.yml"


def load_config(config_path: str = CONFIG_PATH) -> dict:
    with open(config_path, "r") as f:
        return yaml.safe_load(f)
