import unittest

from amrstencil.schedule import advance_count, schedule


class ScheduleTest(unittest.TestCase):
    def test_first_window(self) -> None:
        s = schedule(0, 3, 2)
        self.assertEqual(s.active_patch, 0)
        self.assertTrue(s.just_activated)
        self.assertTrue(s.should_advance)
        s = schedule(1, 3, 2)
        self.assertFalse(s.just_activated)
        self.assertTrue(s.should_advance)
        s = schedule(2, 3, 2)
        self.assertFalse(s.just_activated)
        self.assertFalse(s.should_advance)
        s = schedule(3, 3, 2)
        self.assertEqual(s.active_patch, 1)
        self.assertTrue(s.just_activated)

    def test_active_patch_cycles_with_four_periods(self) -> None:
        for period in (1, 2, 5):
            seen = [schedule(it, period, 1).active_patch for it in range(4 * period)]
            self.assertEqual(sorted(set(seen)), [0, 1, 2, 3])
            for it in range(60):
                self.assertEqual(
                    schedule(it, period, 1).active_patch,
                    schedule(it + 4 * period, period, 1).active_patch,
                )

    def test_advance_true_for_duration_out_of_period(self) -> None:
        for period in (1, 3, 7):
            for duration in range(1, period + 1):
                for start in range(0, 25):
                    window = [schedule(start + k, period, duration).should_advance for k in range(period)]
                    self.assertEqual(sum(window), duration)

    def test_duration_equal_period_never_dormant(self) -> None:
        self.assertTrue(all(schedule(it, 4, 4).should_advance for it in range(50)))

    def test_activation_once_per_period(self) -> None:
        activated = [it for it in range(20) if schedule(it, 5, 2).just_activated]
        self.assertEqual(activated, [0, 5, 10, 15])

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            schedule(0, 0, 1)
        with self.assertRaises(ValueError):
            schedule(0, 2, 3)
        with self.assertRaises(ValueError):
            schedule(0, 2, 0)
        with self.assertRaises(ValueError):
            schedule(-1, 2, 1)


class AdvanceCountTest(unittest.TestCase):
    def test_matches_brute_force(self) -> None:
        for period in (1, 2, 3):
            for duration in range(1, period + 1):
                for total in range(0, 30):
                    for g in range(4):
                        expected = sum(
                            1
                            for it in range(total)
                            if schedule(it, period, duration).active_patch == g
                            and schedule(it, period, duration).should_advance
                        )
                        self.assertEqual(advance_count(g, total, period, duration), expected)

    def test_known_values(self) -> None:
        # six executed iterations, period 2, duration 1: patches 0..2 advanced once
        self.assertEqual([advance_count(g, 6, 2, 1) for g in range(4)], [1, 1, 1, 0])


if __name__ == "__main__":
    unittest.main()
