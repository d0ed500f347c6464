from fundus_demo.core.config import DemoConfig
from fundus_demo.ui.pages import build_app
from fundus_demo.utils.logging import configure_logging


def main():
    config = DemoConfig()
    configure_logging(config.log_level)
    demo = build_app(config)
    demo.launch()


if __name__ == "__main__":
    main()
