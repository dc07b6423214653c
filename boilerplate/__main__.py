"""Run the API with uvicorn: ``python -m boilerplate``."""
import uvicorn

from boilerplate.config import load_app_config, load_env_file


def main() -> None:
    load_env_file()
    config = load_app_config()
    uvicorn.run("boilerplate.api.main:app", host=config.host, port=config.port)


if __name__ == "__main__":
    main()
