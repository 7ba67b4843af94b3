"""Protobuf messages of the dodgeball service (see proto/dodgeball.proto).

The message classes are built from a descriptor at import time so no
generated module has to be checked in.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError, EncodeError

from dodgeball.errors import CodecError
from dodgeball.models.dc_models import PlayerModel, ScenarioRequestModel, ScenarioResultModel

PACKAGE = "dodgeball"
SERVICE_NAME = f"{PACKAGE}.DodgeballService"
RUN_SIMULATION = "RunSimulation"

_FieldProto = descriptor_pb2.FieldDescriptorProto


def _add_field(message, name: str, number: int, field_type: int, *, type_name=None, repeated=False):
    field = message.field.add()
    field.name = name
    field.number = number
    field.type = field_type
    field.label = _FieldProto.LABEL_REPEATED if repeated else _FieldProto.LABEL_OPTIONAL
    if type_name is not None:
        field.type_name = type_name


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = "dodgeball.proto"
    file_proto.package = PACKAGE
    file_proto.syntax = "proto3"

    player = file_proto.message_type.add()
    player.name = "Player"
    _add_field(player, "x", 1, _FieldProto.TYPE_INT64)
    _add_field(player, "y", 2, _FieldProto.TYPE_INT64)
    _add_field(player, "alive", 3, _FieldProto.TYPE_BOOL)

    simulation_input = file_proto.message_type.add()
    simulation_input.name = "SimulationInput"
    _add_field(
        simulation_input,
        "players",
        1,
        _FieldProto.TYPE_MESSAGE,
        type_name=f".{PACKAGE}.Player",
        repeated=True,
    )
    _add_field(simulation_input, "start_direction", 2, _FieldProto.TYPE_INT32)
    _add_field(simulation_input, "start_index", 3, _FieldProto.TYPE_INT32)

    simulation_result = file_proto.message_type.add()
    simulation_result.name = "SimulationResult"
    _add_field(simulation_result, "throws", 1, _FieldProto.TYPE_INT32)
    _add_field(simulation_result, "last_player", 2, _FieldProto.TYPE_INT32)

    service = file_proto.service.add()
    service.name = "DodgeballService"
    method = service.method.add()
    method.name = RUN_SIMULATION
    method.input_type = f".{PACKAGE}.SimulationInput"
    method.output_type = f".{PACKAGE}.SimulationResult"
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file_descriptor().SerializeToString())

Player = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.Player"))
SimulationInput = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PACKAGE}.SimulationInput")
)
SimulationResult = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PACKAGE}.SimulationResult")
)


def encode_request(request: ScenarioRequestModel) -> bytes:
    try:
        message = SimulationInput(
            players=[Player(x=p.x, y=p.y, alive=p.alive) for p in request.players],
            start_direction=request.start_direction,
            start_index=request.start_index,
        )
        return message.SerializeToString()
    except (EncodeError, ValueError) as e:
        raise CodecError(f"Failed to encode SimulationInput: {e}") from e


def decode_request(payload: bytes) -> ScenarioRequestModel:
    try:
        message = SimulationInput.FromString(payload)
        return ScenarioRequestModel(
            players=tuple(PlayerModel(x=p.x, y=p.y, alive=p.alive) for p in message.players),
            start_direction=message.start_direction,
            start_index=message.start_index,
        )
    except (DecodeError, ValueError) as e:
        raise CodecError(f"Failed to decode SimulationInput: {e}") from e


def encode_result(result: ScenarioResultModel) -> bytes:
    message = SimulationResult(throws=result.throws, last_player=result.last_player)
    return message.SerializeToString()


def decode_result(payload: bytes) -> ScenarioResultModel:
    """Decode a SimulationResult

    Args:
        payload (bytes): Serialized SimulationResult, empty means all fields are zero

    Raises:
        CodecError: If the bytes are not a valid SimulationResult

    Returns:
        ScenarioResultModel: The decoded result
    """
    try:
        message = SimulationResult.FromString(payload)
        return ScenarioResultModel(throws=message.throws, last_player=message.last_player)
    except (DecodeError, ValueError) as e:
        raise CodecError(f"Failed to decode SimulationResult: {e}") from e
