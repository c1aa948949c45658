"""
Tests for tone frame encode/decode and stream state.
"""

import numpy as np
import pytest
import soundfile as sf

from tinytones import (
    FRAME_1600,
    FRAME_3200,
    MAX_INDEX,
    FrameError,
    GainOutOfRangeError,
    IndexOutOfRangeError,
    ToneBank,
    ToneDecoder,
    ToneEncoder,
    ToneState,
    decode,
    encode,
    synthesize,
)


class TestRoundTrip:
    """Test encode followed by decode."""

    @pytest.mark.parametrize("frame_class", [FRAME_3200, FRAME_1600])
    def test_every_index_and_gain(self, frame_class):
        for index in range(MAX_INDEX + 1):
            for gain_step in range(16):
                result = decode(frame_class, encode(frame_class, index, gain_step), 0)

                assert result.ok, (index, gain_step, result.reason)
                assert result.phase == frame_class.samples
                assert result.tone.index == index
                assert result.gain_step == gain_step
                assert len(result.samples) == frame_class.samples

    def test_dtmf_one(self):
        """DTMF 1 at full gain decodes to 697 Hz + 1209 Hz."""
        frame = encode(FRAME_3200, 0x00, 0xF)
        result = decode(FRAME_3200, frame, 0)

        assert result.ok
        assert result.phase == 160
        assert len(result.samples) == 160
        assert result.tone.bank is ToneBank.DTMF

        # One second of audio puts every integer frequency on its own bin
        decoder = ToneDecoder(FRAME_3200)
        samples = decoder.decode_stream([frame] * 50)
        spectrum = np.abs(np.fft.rfft(samples.astype(np.float64)))

        peaks = sorted(int(k) for k in np.argsort(spectrum)[-2:])
        assert peaks == [697, 1209]

    def test_note_single_frequency(self):
        frame = encode(FRAME_1600, 0x2E, 0xF)  # A4
        samples = ToneDecoder(FRAME_1600).decode_stream([frame] * 25)

        spectrum = np.abs(np.fft.rfft(samples.astype(np.float64)))
        assert np.argmax(spectrum) == 440

    def test_samples_within_clip(self):
        for index in range(MAX_INDEX + 1):
            result = decode(FRAME_1600, encode(FRAME_1600, index, 0xF), 0)
            assert np.max(np.abs(result.samples.astype(np.int32))) <= 32760


class TestEncodeErrors:
    """Test encode range checks."""

    def test_index_out_of_range(self):
        with pytest.raises(IndexOutOfRangeError):
            encode(FRAME_3200, MAX_INDEX + 1, 0)

    def test_gain_out_of_range(self):
        with pytest.raises(GainOutOfRangeError):
            encode(FRAME_1600, 0, 16)


class TestDecodeFailures:
    """Test decode of frames that are not tone frames."""

    def test_failure_is_silent_and_keeps_phase(self):
        frame = bytearray(encode(FRAME_3200, 0x05, 0xF))
        frame[7] ^= 0x40

        result = decode(FRAME_3200, bytes(frame), 320)

        assert not result.ok
        assert result.reason is FrameError.CHECKSUM_MISMATCH
        assert result.phase == 320
        assert result.tone is None
        assert len(result.samples) == 160
        assert result.samples.dtype == np.int16
        assert not result.samples.any()

    def test_speech_frame(self):
        """Ordinary codec payload is reported as a header mismatch."""
        result = decode(FRAME_1600, bytes.fromhex("3A7F0C11D2904B65"), 0)

        assert result.reason is FrameError.HEADER_MISMATCH
        assert len(result.samples) == 320
        assert not result.samples.any()


class TestToneDecoder:
    """Test phase threading across frames."""

    def test_phase_continuity(self):
        frame = encode(FRAME_3200, 0x2E, 0xF)

        first = decode(FRAME_3200, frame, 0)
        second = decode(FRAME_3200, frame, first.phase)

        assert second.phase == 320

        stream = np.concatenate([first.samples, second.samples])
        expected, _ = synthesize(440.0, 440.0, 100.0, 0, 320)
        assert np.array_equal(stream, expected)

    def test_state_threads_phase(self):
        state = ToneState()
        decoder = ToneDecoder(FRAME_1600, state)
        frame = encode(FRAME_1600, 0x03, 0x8)

        decoder.decode(frame)
        decoder.decode(frame)

        assert state.phase == 640

    def test_non_tone_frame_does_not_advance(self):
        decoder = ToneDecoder(FRAME_3200)
        frame = encode(FRAME_3200, 0x03, 0x8)

        decoder.decode(frame)
        decoder.decode(bytes(8))
        decoder.decode(frame)

        assert decoder.state.phase == 320

    def test_decode_stream(self):
        decoder = ToneDecoder(FRAME_3200)
        tone = encode(FRAME_3200, 0x12, 0xF)

        samples = decoder.decode_stream([tone, bytes(8), tone])

        assert len(samples) == 480
        assert samples[:160].any()
        assert not samples[160:320].any()
        assert samples[320:].any()

    def test_decode_stream_empty(self):
        samples = ToneDecoder(FRAME_3200).decode_stream([])
        assert len(samples) == 0

    def test_independent_streams(self):
        frame = encode(FRAME_3200, 0x07, 0xF)
        a = ToneDecoder(FRAME_3200)
        b = ToneDecoder(FRAME_3200)

        a.decode(frame)
        a.decode(frame)
        b.decode(frame)

        assert a.state.phase == 320
        assert b.state.phase == 160

    def test_reset(self):
        decoder = ToneDecoder(FRAME_3200)
        decoder.decode(encode(FRAME_3200, 0, 0))
        decoder.reset()
        assert decoder.state.phase == 0

    def test_decode_to_file(self, tmp_path):
        frames = ToneEncoder(FRAME_3200).burst(0x0B, 0xC, duration_ms=100)
        path = tmp_path / "tone.wav"

        written = ToneDecoder(FRAME_3200).decode_to_file(frames, path)
        data, sample_rate = sf.read(str(path), dtype="int16")

        assert sample_rate == 8000
        assert written == 800
        assert np.array_equal(data, ToneDecoder(FRAME_3200).decode_stream(frames))


class TestToneEncoder:
    """Test tone bursts."""

    def test_frames_for(self):
        assert ToneEncoder(FRAME_3200).frames_for(100) == 5
        assert ToneEncoder(FRAME_1600).frames_for(100) == 3
        assert ToneEncoder(FRAME_3200).frames_for(0) == 1
        assert ToneEncoder(FRAME_3200).frames_for(21) == 2

    def test_burst(self):
        frames = ToneEncoder(FRAME_1600).burst(0x2E, 0x4, duration_ms=120)

        assert len(frames) == 3
        assert all(frame == encode(FRAME_1600, 0x2E, 0x4) for frame in frames)

    def test_queue_and_next_frame(self):
        encoder = ToneEncoder(FRAME_3200)
        state = ToneState()

        encoder.queue(state, 0x15, 0x3, duration_ms=40)
        assert state.index == 0x15
        assert state.gain_step == 0x3
        assert state.frames_to_send == 2

        assert encoder.next_frame(state) == encode(FRAME_3200, 0x15, 0x3)
        assert encoder.next_frame(state) is not None
        assert encoder.next_frame(state) is None
        assert state.frames_to_send == 0

    def test_queue_rejects_bad_tone(self):
        encoder = ToneEncoder(FRAME_3200)
        state = ToneState()

        with pytest.raises(IndexOutOfRangeError):
            encoder.queue(state, MAX_INDEX + 1, 0, duration_ms=100)

        assert state == ToneState()


class TestToneState:
    """Test state defaults."""

    def test_defaults(self):
        state = ToneState()
        assert state.phase == 0
        assert state.index == 0
        assert state.gain_step == 0xF
        assert state.frames_to_send == 0

    def test_reset(self):
        state = ToneState(phase=960, index=0x20, gain_step=2, frames_to_send=4)
        state.reset()
        assert state == ToneState()
