from photonctl.utils.output import emit, emit_rows, timestamp_to_string
from photonctl.utils.prompts import ask_for_input, confirmed
from photonctl.utils.serialization import to_plain_data

__all__ = ["ask_for_input", "confirmed", "emit", "emit_rows", "timestamp_to_string", "to_plain_data"]
