from sig_change.config import Config
from sig_change.web import create_app


def main():
    config = Config()  # type: ignore[call-arg]
    app = create_app(config)
    config.print_config()
    app.run(host=config.HOST, port=config.PORT, single_process=True)


if __name__ == "__main__":
    main()
