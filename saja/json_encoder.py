# saja to json encoding

import datetime
import decimal
from flask.json.provider import DefaultJSONProvider
from uuid import UUID
import saja
from typing import Any


class _SAJAJSONEncoder:
    """
    JSON encoding for the column values found in resource object attributes
    """

    # pylint: disable=too-many-return-statements
    def default(self, obj: Any, **kwargs) -> Any:
        """
        override the default json encoding
        :param obj: object to be encoded
        :return: encoded/serialized object
        """
        if isinstance(obj, datetime.datetime):
            return obj.isoformat()
        if isinstance(obj, (datetime.date, datetime.time)):
            return obj.isoformat()
        if isinstance(obj, datetime.timedelta):
            return str(obj)
        if isinstance(obj, set):
            return list(obj)
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, decimal.Decimal):
            return float(obj)
        if isinstance(obj, bytes):
            if obj == b"":
                return ""
            saja.log.debug("SAJAJSONEncoder: serializing bytes obj")
            return obj.hex()

        saja.log.warning(f'JSON Encoding Error: Unknown object type "{type(obj)}" for {obj}')
        return str(obj)


class SAJAJSONProvider(_SAJAJSONEncoder, DefaultJSONProvider):
    """
    Flask JSON encoding
    """

    mimetype = "application/vnd.api+json"
    # keep the member order of the documents
    sort_keys = False
