"""
Reading connection parameters from keyword arguments, environment
variables and a configuration file.

The configuration file is json (or yaml, if pyyaml is installed) with
one section per account:

    {
        "default": {
            "caldav_url": "https://caldav.example.com/",
            "caldav_user": "alice",
            "caldav_pass": "secret"
        },
        "work": {
            "inherits": "default",
            "caldav_url": "https://work.example.com/dav/"
        }
    }
"""
import json
import logging
import os
from typing import Any
from typing import Dict
from typing import Optional

## Environment variables recognized by get_connection_params, minus the
## DAVCAL_ prefix.  DAVCAL_DEBUGMODE and DAVCAL_COMMDUMP are handled by
## davcal.lib.error.
CONNECTION_KEYS = ("url", "username", "password", "token", "account_type")


def config_section(config: Dict[str, Any], section: str = "default") -> Dict[str, Any]:
    """
    The given section of the config, with the keys of the section it
    `inherits` from filled in.
    """
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    return ret


def read_config(fn: Optional[str], interactive_error: bool = False) -> Optional[dict]:
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '/')}/.config/"
        for config_file in (
            f"{cfgdir}/davcal/calendar.conf",
            f"{cfgdir}/davcal/calendar.yaml",
            f"{cfgdir}/davcal/calendar.json",
            "/etc/davcal/calendar.conf",
        ):
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return None

    try:
        try:
            with open(fn, "rb") as config_file:
                return json.load(config_file)
        except json.decoder.JSONDecodeError:
            ## Late import, yaml is not in the requirements
            try:
                import yaml

                try:
                    with open(fn, "rb") as config_file:
                        return yaml.load(config_file, yaml.Loader)
                except yaml.YAMLError:
                    logging.error(
                        f"config file {fn} exists but is neither valid json nor yaml.  Check the syntax."
                    )
            except ImportError:
                logging.error(
                    f"config file {fn} exists but is not valid json, and pyyaml is not installed."
                )

    except FileNotFoundError:
        logging.info("no config file found")
    except ValueError:
        if interactive_error:
            logging.error(
                "error in config file.  Be aware that the interactive configuration will ignore and overwrite the current broken config file",
                exc_info=True,
            )
        else:
            logging.error("error in config file.  It will be ignored", exc_info=True)
    return {}


def get_connection_params(
    check_config_file: bool = True,
    config_file: Optional[str] = None,
    config_section_name: Optional[str] = None,
    environment: bool = True,
    **config_data,
) -> Optional[Dict[str, str]]:
    """
    Connection parameters (url, username, password, token,
    account_type) from the first source that has any, in this order:

    * the keyword arguments given
    * environment variables `DAVCAL_URL`, `DAVCAL_USERNAME`,
      `DAVCAL_PASSWORD`, `DAVCAL_TOKEN`, `DAVCAL_ACCOUNT_TYPE`
    * the config file given, `DAVCAL_CONFIG_FILE`, or the default
      locations.  Keys are prefixed `caldav_`, `caldav_user` and
      `caldav_pass` are accepted as well.

    Returns None if nothing is found.
    """
    if config_data:
        return dict(config_data)

    if environment:
        conf = {}
        for key in CONNECTION_KEYS:
            value = os.environ.get(f"DAVCAL_{key.upper()}")
            if value:
                conf[key] = value
        if conf:
            return conf
        if not config_file:
            config_file = os.environ.get("DAVCAL_CONFIG_FILE")
        if not config_section_name:
            config_section_name = os.environ.get("DAVCAL_CONFIG_SECTION")

    if check_config_file:
        cfg = read_config(config_file)
        if cfg:
            section = config_section(cfg, config_section_name or "default")
            conn_params = {}
            for k in section:
                if k.startswith("caldav_") and section[k]:
                    key = k[7:]
                    if key == "pass":
                        key = "password"
                    if key == "user":
                        key = "username"
                    conn_params[key] = section[k]
            if conn_params:
                return conn_params

    return None


def get_client(**kwargs):
    """
    A SyncCalDAVClient with authentication headers built from the
    connection parameters.  Does not connect; pass client.url to
    create_account for that.

    The url and account type end up as attributes `url` and
    `account_type` on the client.  Returns None if no connection
    parameters are found.
    """
    from davcal.client import SyncCalDAVClient
    from davcal.lib.auth import basic_auth_headers
    from davcal.lib.auth import bearer_auth_headers
    from davcal.protocol.types import AccountType

    params = get_connection_params(**kwargs)
    if params is None:
        return None
    if params.get("token"):
        headers = bearer_auth_headers(params["token"])
    elif params.get("username"):
        headers = basic_auth_headers(params["username"], params.get("password", ""))
    else:
        headers = None
    account_type = AccountType(params.get("account_type", "caldav"))
    client = SyncCalDAVClient(headers=headers)
    client.url = params.get("url")
    client.account_type = account_type
    return client
