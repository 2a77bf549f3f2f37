import unittest

import numpy as np

from spectral_pitch.bins import find_max_bin
from spectral_pitch.errors import InvalidInput
from spectral_pitch.note_types import InspectionRange
from spectral_pitch.resolution import resolution
from spectral_pitch.spectrum import SpectrumAnalyser

SAMPLE_RATE = 44100


def sine(frequency, fft_size, amplitude=0.5):
    t = np.arange(fft_size) / SAMPLE_RATE
    return amplitude * np.sin(2 * np.pi * frequency * t)


class TestSpectrumAnalyser(unittest.TestCase):
    def test_bin_count(self):
        analyser = SpectrumAnalyser(fft_size=2048)
        self.assertEqual(analyser.frequency_bin_count, 1024)
        self.assertEqual(len(analyser.byte_frequency_data(np.zeros(2048))), 1024)

    def test_peak_lands_on_tone(self):
        analyser = SpectrumAnalyser(fft_size=4096, smoothing_time_constant=0.0)
        # Quiet enough that the main lobe stays below the byte ceiling
        bins = analyser.byte_frequency_data(sine(440.0, 4096, amplitude=0.01))

        peak = find_max_bin(bins, InspectionRange.full(len(bins)))
        hz_per_bin = resolution(SAMPLE_RATE, 4096)
        self.assertLessEqual(abs(peak * hz_per_bin - 440.0), 2 * hz_per_bin)
        self.assertEqual(bins.dtype, np.uint8)
        self.assertGreater(int(bins[peak]), 100)
        self.assertLess(int(bins[peak]), 255)

    def test_silence_is_zero_bytes(self):
        analyser = SpectrumAnalyser(fft_size=1024)
        bins = analyser.byte_frequency_data(np.zeros(1024))
        self.assertFalse(bins.any())

    def test_silence_is_minus_infinity_decibels(self):
        analyser = SpectrumAnalyser(fft_size=1024)
        decibels = analyser.float_frequency_data(np.zeros(1024))
        self.assertTrue(np.all(np.isneginf(decibels)))

    def test_smoothing_blends_frames(self):
        tone = sine(1000.0, 2048)
        smoothed = SpectrumAnalyser(fft_size=2048, smoothing_time_constant=0.5)
        smoothed.float_frequency_data(tone)
        decayed = smoothed.float_frequency_data(np.zeros(2048))

        fresh = SpectrumAnalyser(fft_size=2048, smoothing_time_constant=0.5)
        original = fresh.float_frequency_data(tone)

        peak = int(np.argmax(original))
        # Half the magnitude is about 6 dB down
        self.assertAlmostEqual(decayed[peak], original[peak] - 20 * np.log10(2), places=6)

    def test_reset_drops_history(self):
        analyser = SpectrumAnalyser(fft_size=1024, smoothing_time_constant=0.9)
        analyser.byte_frequency_data(sine(800.0, 1024))
        analyser.reset()
        self.assertFalse(analyser.byte_frequency_data(np.zeros(1024)).any())

    def test_short_frames_are_padded(self):
        analyser = SpectrumAnalyser(fft_size=1024)
        self.assertEqual(len(analyser.byte_frequency_data(np.ones(100))), 512)

    def test_long_frames_use_latest_samples(self):
        long_frame = np.concatenate([sine(300.0, 4096), np.zeros(1024)])
        analyser = SpectrumAnalyser(fft_size=1024, smoothing_time_constant=0.0)
        self.assertFalse(analyser.byte_frequency_data(long_frame).any())

    def test_invalid_parameters(self):
        with self.assertRaises(InvalidInput):
            SpectrumAnalyser(fft_size=1000)
        with self.assertRaises(InvalidInput):
            SpectrumAnalyser(fft_size=16)
        with self.assertRaises(InvalidInput):
            SpectrumAnalyser(fft_size=65536)
        with self.assertRaises(InvalidInput):
            SpectrumAnalyser(smoothing_time_constant=1.5)
        with self.assertRaises(InvalidInput):
            SpectrumAnalyser(min_decibels=-30.0, max_decibels=-30.0)


if __name__ == "__main__":
    unittest.main()
