import sys
import argparse
from siphon.config import conf, load_config
from siphon.errors import ConfigError

parser = argparse.ArgumentParser()
parser.add_argument("-c", "--config", default=None, help="Path of the json config file.")
parser.add_argument("--develop", action="store_true", help="Run app on development mode.")
parser.add_argument("--log", type=int, help="Set log level", default=None)
parser.add_argument("--host", default=None, help="Override http host")
parser.add_argument("--port", type=int, default=None, help="Override http port")

if __name__ == "__main__":
    args = parser.parse_args(sys.argv[1:])
    try:
        load_config(args.config)
    except ConfigError as e:
        print("Error: ConfigFile is not load")
        print("reason:", e)
        exit(1)
    if args.develop:
        conf.set("site", "debug", True)
        conf.set("logger", "level", 10)
        conf.set("logger", "save_log", False)
    if args.log is not None:
        conf.set("logger", "level", args.log)
    from siphon.logger import main_logger
    main_logger.configure()
    from siphon.app import build_handler
    from siphon.server import FullAsyncServer
    try:
        FullAsyncServer(handler=build_handler()).run(args.host, args.port)
    except OSError as e:
        print(e)
        exit(1)
    exit(0)
