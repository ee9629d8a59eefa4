"""Accessor families composed onto the codec handles.

Each accessor is a thin call into :class:`~opuskit.codec.control.ControlChannel`;
the request objects in :mod:`opuskit.codec.control` carry all of the
encoding and validation rules.
"""

from __future__ import annotations

from typing import Optional

from . import control as ctl
from .control import ControlChannel
from .types import Application, Bandwidth, Bitrate, Channels, FrameSize, Signal


class GenericCtls:
    """Requests understood by every handle kind."""

    _control: ControlChannel

    def reset_state(self) -> None:
        """Reset the codec state to be equivalent to a freshly initialized state."""
        self._control.invoke(ctl.RESET_STATE)

    def get_final_range(self) -> int:
        """Final state of the entropy coder's range, for bitstream checks."""
        return self._control.get(ctl.GET_FINAL_RANGE)

    def get_bandwidth(self) -> Bandwidth:
        return self._control.get(ctl.GET_BANDWIDTH)

    def get_sample_rate(self) -> int:
        return self._control.get(ctl.GET_SAMPLE_RATE)

    def set_phase_inversion_disabled(self, disabled: bool) -> None:
        """Disable the use of phase inversion for intensity stereo."""
        self._control.set(ctl.SET_PHASE_INVERSION_DISABLED, disabled)

    def get_phase_inversion_disabled(self) -> bool:
        return self._control.get(ctl.GET_PHASE_INVERSION_DISABLED)

    def get_in_dtx(self) -> bool:
        """Whether the last encoded frame was a DTX frame."""
        return self._control.get(ctl.GET_IN_DTX)


class EncoderCtls:
    """Encoder-only requests."""

    _control: ControlChannel

    def set_complexity(self, value: int) -> None:
        """Computational complexity, 0 (fastest) to 10 (best)."""
        self._control.set(ctl.SET_COMPLEXITY, value)

    def get_complexity(self) -> int:
        return self._control.get(ctl.GET_COMPLEXITY)

    def set_bitrate(self, value: Bitrate) -> None:
        self._control.set(ctl.SET_BITRATE, value)

    def get_bitrate(self) -> Bitrate:
        return self._control.get(ctl.GET_BITRATE)

    def set_vbr(self, vbr: bool) -> None:
        self._control.set(ctl.SET_VBR, vbr)

    def get_vbr(self) -> bool:
        return self._control.get(ctl.GET_VBR)

    def set_vbr_constraint(self, constrained: bool) -> None:
        self._control.set(ctl.SET_VBR_CONSTRAINT, constrained)

    def get_vbr_constraint(self) -> bool:
        return self._control.get(ctl.GET_VBR_CONSTRAINT)

    def set_force_channels(self, value: Optional[Channels]) -> None:
        """Force mono or stereo packets regardless of the input layout.

        ``None`` restores the automatic choice. Useful when the caller knows
        a stereo stream currently carries a mono source.
        """
        self._control.set(ctl.SET_FORCE_CHANNELS, value)

    def get_force_channels(self) -> Optional[Channels]:
        return self._control.get(ctl.GET_FORCE_CHANNELS)

    def set_max_bandwidth(self, bandwidth: Bandwidth) -> None:
        """Upper bound on the bandpass the encoder may select automatically."""
        self._control.set(ctl.SET_MAX_BANDWIDTH, bandwidth)

    def get_max_bandwidth(self) -> Bandwidth:
        return self._control.get(ctl.GET_MAX_BANDWIDTH)

    def set_bandwidth(self, bandwidth: Bandwidth) -> None:
        self._control.set(ctl.SET_BANDWIDTH, bandwidth)

    def set_signal(self, signal: Signal) -> None:
        self._control.set(ctl.SET_SIGNAL, signal)

    def get_signal(self) -> Signal:
        return self._control.get(ctl.GET_SIGNAL)

    def set_application(self, application: Application) -> None:
        self._control.set(ctl.SET_APPLICATION, application)

    def get_application(self) -> Application:
        return self._control.get(ctl.GET_APPLICATION)

    def get_lookahead(self) -> int:
        """Total samples of delay added by the entire codec."""
        return self._control.get(ctl.GET_LOOKAHEAD)

    def set_inband_fec(self, enabled: bool) -> None:
        self._control.set(ctl.SET_INBAND_FEC, enabled)

    def get_inband_fec(self) -> bool:
        return self._control.get(ctl.GET_INBAND_FEC)

    def set_packet_loss_perc(self, value: int) -> None:
        """Expected packet loss, in percent (0 to 100)."""
        self._control.set(ctl.SET_PACKET_LOSS_PERC, value)

    def get_packet_loss_perc(self) -> int:
        return self._control.get(ctl.GET_PACKET_LOSS_PERC)

    def set_dtx(self, enabled: bool) -> None:
        """Discontinuous transmission."""
        self._control.set(ctl.SET_DTX, enabled)

    def get_dtx(self) -> bool:
        return self._control.get(ctl.GET_DTX)

    def set_lsb_depth(self, depth: int) -> None:
        """Depth of the input signal in bits, 8 to 24 inclusive."""
        self._control.set(ctl.SET_LSB_DEPTH, depth)

    def get_lsb_depth(self) -> int:
        return self._control.get(ctl.GET_LSB_DEPTH)

    def set_expert_frame_duration(self, frame_size: FrameSize) -> None:
        """Variable duration frames. Leave at :attr:`FrameSize.ARG` unless you know better."""
        self._control.set(ctl.SET_EXPERT_FRAME_DURATION, frame_size)

    def get_expert_frame_duration(self) -> FrameSize:
        return self._control.get(ctl.GET_EXPERT_FRAME_DURATION)

    def set_prediction_disabled(self, disabled: bool) -> None:
        """Disable almost all use of prediction, making frames nearly independent."""
        self._control.set(ctl.SET_PREDICTION_DISABLED, disabled)

    def get_prediction_disabled(self) -> bool:
        return self._control.get(ctl.GET_PREDICTION_DISABLED)


class DecoderCtls:
    """Decoder-only requests."""

    _control: ControlChannel

    def set_gain(self, gain: int) -> None:
        """Output gain in Q8 dB units, -32768 to 32767.

        The scale factor applied is ``10 ** (gain / (20.0 * 256))``. This
        setting survives :meth:`reset_state`.
        """
        self._control.set(ctl.SET_GAIN, gain)

    def get_gain(self) -> int:
        return self._control.get(ctl.GET_GAIN)

    def get_last_packet_duration(self) -> int:
        """Duration in samples of the last packet decoded or concealed."""
        return self._control.get(ctl.GET_LAST_PACKET_DURATION)

    def get_pitch(self) -> int:
        """Pitch of the last decoded frame, or 0 when it was unvoiced or not coded."""
        return self._control.get(ctl.GET_PITCH)


__all__ = ["DecoderCtls", "EncoderCtls", "GenericCtls"]
