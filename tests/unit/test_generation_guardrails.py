"""Unit tests for generated script and audio guardrails"""
import pytest

from generation.guardrails.rules import MAX_SPEECH_INPUT_CHARS, fit_for_speech, looks_like_mp3, validate_script


class TestScriptValidation:
    """Test script guardrail rules"""

    def test_valid_script_passes(self):
        assert validate_script("Welcome to the show. Today: gardens!") == []

    @pytest.mark.parametrize("script", ["", "   ", "\n\t", None])
    def test_empty_script_rejected(self, script):
        violations = validate_script(script)
        assert violations == ["Script is empty"]

    def test_script_without_words_rejected(self):
        violations = validate_script("... 123 !!!")
        assert any("readable" in v for v in violations)

    def test_non_latin_words_accepted(self):
        assert validate_script("오늘의 에피소드를 시작합니다") == []


class TestSpeechFitting:
    """Test trimming scripts to the speech input limit"""

    def test_short_script_unchanged(self):
        assert fit_for_speech("  Hello there.  ") == "Hello there."

    def test_long_script_ends_on_sentence(self):
        script = "One more sentence for the road. " * 300
        fitted = fit_for_speech(script)

        assert len(fitted) <= MAX_SPEECH_INPUT_CHARS
        assert fitted.endswith("road.")
        assert script.startswith(fitted)

    def test_long_script_without_sentences_ends_on_word(self):
        script = "word " * 2000
        fitted = fit_for_speech(script, max_chars=100)

        assert len(fitted) <= 100
        assert fitted.split() == ["word"] * len(fitted.split())


class TestMp3Detection:
    """Test recognition of playable MP3 payloads"""

    def test_id3_tag(self):
        assert looks_like_mp3(b"ID3\x04\x00\x00\x00\x00\x00\x00")

    def test_frame_sync(self):
        assert looks_like_mp3(b"\xff\xfb\x90\x64" + bytes(10))

    @pytest.mark.parametrize("payload", [b"", b"\xff", b"RIFF....WAVE", b"\x00\x00\x00\x00"])
    def test_rejects_other_payloads(self, payload):
        assert not looks_like_mp3(payload)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
