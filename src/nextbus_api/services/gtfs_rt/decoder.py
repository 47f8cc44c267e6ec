"""Hand-rolled GTFS-RT decode layer for the VehiclePosition subset.

Message layout consumed (field number, wire type):

    FeedMessage       2 entity (LD)
    FeedEntity        1 id (LD string), 4 vehicle (LD)
    VehiclePosition   1 trip (LD), 2 position (LD), 5 timestamp (varint),
                      8 vehicle (LD)
    TripDescriptor    1 trip_id (LD string), 5 route_id (LD string)
    Position          1 latitude, 2 longitude, 3 bearing, 5 speed (fixed32 float),
                      4 odometer (fixed64 double, discarded)
    VehicleDescriptor 1 id (LD string)

Anything else, at any level, is skipped. A known field number arriving with an
unexpected wire type is treated like an unknown field. A string that is not
valid UTF-8 leaves only that field unset.
"""

from __future__ import annotations

from dataclasses import dataclass

from nextbus_api.logging import get_logger
from nextbus_api.models.realtime import VehicleLocation
from nextbus_api.services.gtfs_rt.wire import WireReader, WireType

logger = get_logger(__name__)

# FeedMessage
FEED_ENTITY = 2
# FeedEntity
ENTITY_ID = 1
ENTITY_VEHICLE = 4
# VehiclePosition
VP_TRIP = 1
VP_POSITION = 2
VP_TIMESTAMP = 5
VP_VEHICLE = 8
# TripDescriptor
TRIP_ID = 1
TRIP_ROUTE_ID = 5
# Position
POSITION_FLOATS = {1: "latitude", 2: "longitude", 3: "bearing", 5: "speed"}
# VehicleDescriptor
VEHICLE_ID = 1


@dataclass(frozen=True)
class Position:
    latitude: float | None = None
    longitude: float | None = None
    bearing: float | None = None
    speed: float | None = None


@dataclass(frozen=True)
class TripDescriptor:
    trip_id: str | None = None
    route_id: str | None = None


@dataclass(frozen=True)
class VehicleDescriptor:
    id: str | None = None


@dataclass(frozen=True)
class VehiclePositionMessage:
    trip: TripDescriptor | None = None
    position: Position | None = None
    vehicle: VehicleDescriptor | None = None
    timestamp: int | None = None


@dataclass(frozen=True)
class FeedEntity:
    id: str | None = None
    vehicle: VehiclePositionMessage | None = None


def _read_strings(data: bytes, wanted: dict[int, str]) -> dict[str, str]:
    """Collect the string fields in ``wanted`` (field number -> name)."""
    values: dict[str, str] = {}
    for field in WireReader(data).fields():
        if field.field_number in wanted and field.wire_type == WireType.LENGTH_DELIMITED:
            text = field.as_text()
            if text is not None:
                values[wanted[field.field_number]] = text
    return values


def decode_trip_descriptor(data: bytes) -> TripDescriptor:
    return TripDescriptor(**_read_strings(data, {TRIP_ID: "trip_id", TRIP_ROUTE_ID: "route_id"}))


def decode_vehicle_descriptor(data: bytes) -> VehicleDescriptor:
    return VehicleDescriptor(**_read_strings(data, {VEHICLE_ID: "id"}))


def decode_position(data: bytes) -> Position:
    # odometer (4, fixed64) is skipped with everything else
    values: dict[str, float | None] = {}
    for field in WireReader(data).fields():
        if field.field_number in POSITION_FLOATS and field.wire_type == WireType.FIXED32:
            values[POSITION_FLOATS[field.field_number]] = field.as_float()
    return Position(**values)


def decode_vehicle_position(data: bytes) -> VehiclePositionMessage:
    trip: TripDescriptor | None = None
    position: Position | None = None
    vehicle: VehicleDescriptor | None = None
    timestamp: int | None = None

    for field in WireReader(data).fields():
        number, wire_type = field.field_number, field.wire_type
        if wire_type == WireType.LENGTH_DELIMITED:
            if number == VP_TRIP:
                trip = decode_trip_descriptor(field.raw)
            elif number == VP_POSITION:
                position = decode_position(field.raw)
            elif number == VP_VEHICLE:
                vehicle = decode_vehicle_descriptor(field.raw)
        elif number == VP_TIMESTAMP and wire_type == WireType.VARINT:
            timestamp = field.as_varint()

    return VehiclePositionMessage(
        trip=trip, position=position, vehicle=vehicle, timestamp=timestamp
    )


def decode_feed_entity(data: bytes) -> FeedEntity:
    entity_id: str | None = None
    vehicle: VehiclePositionMessage | None = None

    for field in WireReader(data).fields():
        if field.wire_type != WireType.LENGTH_DELIMITED:
            continue
        if field.field_number == ENTITY_ID:
            entity_id = field.as_text()
        elif field.field_number == ENTITY_VEHICLE:
            vehicle = decode_vehicle_position(field.raw)

    return FeedEntity(id=entity_id, vehicle=vehicle)


def to_vehicle_location(entity: FeedEntity) -> VehicleLocation | None:
    """Flatten an entity into a VehicleLocation, or None without a full position."""
    vp = entity.vehicle
    if vp is None or vp.position is None:
        return None
    pos = vp.position
    if pos.latitude is None or pos.longitude is None:
        return None

    vehicle_id = (vp.vehicle.id if vp.vehicle else None) or entity.id or ""
    return VehicleLocation(
        id=vehicle_id,
        route_id=vp.trip.route_id if vp.trip else None,
        trip_id=vp.trip.trip_id if vp.trip else None,
        latitude=pos.latitude,
        longitude=pos.longitude,
        bearing=pos.bearing,
        speed_meters_per_second=pos.speed,
        timestamp_epoch_seconds=vp.timestamp,
    )


class FeedMessageDecoder:
    """Decodes raw FeedMessage bytes without a schema compiler."""

    @staticmethod
    def decode_entities(data: bytes) -> list[FeedEntity]:
        """Decode every top-level entity until the buffer ends or breaks."""
        reader = WireReader(data)
        entities = [
            decode_feed_entity(field.raw)
            for field in reader.fields()
            if field.field_number == FEED_ENTITY
            and field.wire_type == WireType.LENGTH_DELIMITED
        ]

        if not reader.at_end:
            logger.debug(
                "Feed decode stopped early",
                offset=reader.offset,
                size_bytes=len(data),
                entity_count=len(entities),
            )
        return entities

    @staticmethod
    def decode_vehicles(data: bytes) -> list[VehicleLocation]:
        """Decode entities and keep those carrying a complete position."""
        vehicles: list[VehicleLocation] = []
        for entity in FeedMessageDecoder.decode_entities(data):
            location = to_vehicle_location(entity)
            if location is not None:
                vehicles.append(location)
        return vehicles
