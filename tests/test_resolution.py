import unittest

import pytest

from spectral_pitch.errors import InvalidInput
from spectral_pitch.resolution import MIN_FFT_SIZE, Calibration, recommend_size, resolution


class TestResolution(unittest.TestCase):
    def test_cd_quality_2048(self):
        self.assertAlmostEqual(resolution(44100, 2048), 44100 / 2 / (2048 / 2))
        self.assertAlmostEqual(resolution(44100, 2048), 21.5332, places=4)

    def test_decreases_with_fft_size(self):
        sizes = [512, 1024, 2048, 4096, 8192, 16384, 32768]
        values = [resolution(48000, size) for size in sizes]
        self.assertEqual(values, sorted(values, reverse=True))
        self.assertEqual(len(set(values)), len(values))

    def test_invalid_arguments(self):
        with self.assertRaises(InvalidInput):
            resolution(0, 2048)
        with self.assertRaises(InvalidInput):
            resolution(-44100, 2048)
        with self.assertRaises(InvalidInput):
            resolution(44100, 0)
        with self.assertRaises(InvalidInput):
            resolution(44100, 1023)
        with self.assertRaises(InvalidInput):
            resolution(float("nan"), 2048)


class TestRecommendSize(unittest.TestCase):
    def test_five_hz_at_44100(self):
        size = recommend_size(44100, 5)
        # 44100 / 5 = 8820, next power of two is 16384
        self.assertEqual(size, 16384)
        self.assertLessEqual(resolution(44100, size), 5)
        self.assertGreater(resolution(44100, size // 2), 5)

    def test_never_below_floor(self):
        self.assertEqual(recommend_size(44100, 1000), MIN_FFT_SIZE)
        self.assertEqual(recommend_size(8000, 500), 512)

    def test_exact_power_of_two(self):
        # 2 * 24000 / 23.4375 == 2048 exactly
        self.assertEqual(recommend_size(48000, 23.4375), 2048)

    def test_invalid_arguments(self):
        with self.assertRaises(InvalidInput):
            recommend_size(44100, 0)
        with self.assertRaises(InvalidInput):
            recommend_size(44100, -1.0)
        with self.assertRaises(InvalidInput):
            recommend_size(0, 5)

    def test_non_finite_arguments(self):
        for sample_rate, desired in [
            (44100, float("nan")),
            (44100, float("inf")),
            (float("nan"), 5.0),
            (float("inf"), 5.0),
        ]:
            with self.assertRaises(InvalidInput):
                recommend_size(sample_rate, desired)

    def test_resolution_too_fine_for_any_size(self):
        # 44100 / 5e-324 overflows to infinity
        with self.assertRaises(InvalidInput):
            recommend_size(44100, 5e-324)

    def test_very_fine_resolution_still_terminates(self):
        size = recommend_size(44100, 1e-6)
        self.assertEqual(size & (size - 1), 0)
        self.assertLessEqual(resolution(44100, size), 1e-6)


class TestCalibration(unittest.TestCase):
    def test_band_size_is_nyquist(self):
        self.assertEqual(Calibration(44100).band_size, 22050)

    def test_delegates(self):
        calibration = Calibration(48000)
        self.assertEqual(calibration.resolution(4096), resolution(48000, 4096))
        self.assertEqual(calibration.recommend_size(3.0), recommend_size(48000, 3.0))

    def test_rejects_bad_sample_rate(self):
        with self.assertRaises(InvalidInput):
            Calibration(0)


@pytest.mark.parametrize("sample_rate", [8000, 22050, 44100, 48000, 96000])
@pytest.mark.parametrize("desired", [0.5, 1.0, 2.7, 5.0, 10.0, 21.5, 100.0, 5000.0])
def test_recommended_size_meets_resolution(sample_rate, desired):
    size = recommend_size(sample_rate, desired)

    assert size >= MIN_FFT_SIZE
    assert size & (size - 1) == 0
    assert resolution(sample_rate, size) <= desired
    if size > MIN_FFT_SIZE:
        assert resolution(sample_rate, size // 2) > desired
