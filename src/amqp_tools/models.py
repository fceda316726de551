"""Pydantic V2 models for amqp-tools."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, TypeAdapter


class ConnectionProfile(BaseModel):
    """How to reach one broker, as stored under a name in ``config.toml``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    username: StrictStr = Field(..., description="Broker user name")
    password: StrictStr = Field(..., repr=False, description="Broker password")
    host: StrictStr = Field(..., min_length=1, description="Broker host name or address")
    port: StrictInt = Field(..., ge=0, le=65535, description="Broker port")
    secure: StrictBool = Field(..., description="Use TLS (amqps) instead of plain amqp")
    vhost: StrictStr = Field(..., description="Virtual host to open")


# Profile name -> profile, as loaded from one config file.
ConnectionProfileMap = dict[str, ConnectionProfile]

profile_map_adapter: TypeAdapter[ConnectionProfileMap] = TypeAdapter(ConnectionProfileMap)
