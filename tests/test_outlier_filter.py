from conftest import fix
from core.services.outlier_filter import filter_outliers, implied_speed


def _walk(n: int, step_s: float = 60.0) -> list:
    # ~1.1 m/s northward walk
    return [fix(i * step_s, 45.0 + i * 0.0006, 7.0) for i in range(n)]


def test_empty_and_single_fix_pass_through():
    assert filter_outliers([]) == []
    single = [fix(0, 45.0, 7.0, accuracy=50_000)]
    assert filter_outliers(single) == single


def test_clean_log_is_unchanged():
    log = _walk(10)
    assert filter_outliers(log) == log


def test_inaccurate_fix_is_dropped():
    log = _walk(5)
    bad = fix(150, 45.0, 7.0, accuracy=5000)
    noisy = sorted(log + [bad], key=lambda f: f.timestamp)
    assert filter_outliers(noisy, max_accuracy_m=1000) == log


def test_spike_is_dropped():
    log = _walk(6)
    spike = fix(130, 46.0, 8.0)  # ~135 km away, 10 s later
    noisy = sorted(log + [spike], key=lambda f: f.timestamp)
    result = filter_outliers(noisy, max_speed_mps=300)
    assert spike not in result
    assert result == log


def test_fast_but_consistent_trip_is_kept():
    # steady 250 m/s flight: every leg is fast but there is no round trip
    log = [fix(i * 60, 40.0 + i * 0.135, 0.0) for i in range(5)]
    assert filter_outliers(log, max_speed_mps=300) == log


def test_endpoints_are_never_spikes():
    log = [fix(0, 10.0, 10.0), fix(60, 45.0, 7.0), fix(120, 45.0006, 7.0)]
    assert filter_outliers(log) == log


def test_order_is_preserved():
    log = _walk(8)
    result = filter_outliers(log + [])
    assert [f.timestamp for f in result] == sorted(f.timestamp for f in result)


def test_filter_is_idempotent():
    log = _walk(8)
    log.insert(3, fix(150, 50.0, 9.0))
    log.insert(4, fix(160, 50.1, 9.1))
    log.insert(6, fix(250, 45.0, 7.0, accuracy=9000))
    log.sort(key=lambda f: f.timestamp)
    once = filter_outliers(log)
    assert filter_outliers(once) == once


def test_implied_speed_accounts_for_accuracy():
    a = fix(0, 0.0, 0.0, accuracy=100)
    b = fix(1, 0.001, 0.0, accuracy=100)  # ~111 m apart
    assert implied_speed(a, b) == 0.0


def test_implied_speed_same_time_is_infinite():
    a = fix(0, 0.0, 0.0, accuracy=0)
    b = fix(0, 1.0, 0.0, accuracy=0)
    assert implied_speed(a, b) == float("inf")
