"""Tests for sign classification module."""

import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from rpsls.classification.classifier import SignClassifier, ALL_LABELS, UNKNOWN
from rpsls.classification.stabilizer import TemporalStabilizer
from rpsls.hand.features import SignFeatureExtractor, SignMetrics
from rpsls.hand.skeleton import HandPose, NUM_LANDMARKS
from rpsls.thresholds import SignThresholds

DEFAULTS = SignThresholds()


def make_metrics(
    extended=(False, False, False, False),
    bent=None,
    gaps=(0.2, 0.2, 0.2),
    thumb=0.2,
    cos_im=1.0,
    thresholds=DEFAULTS
) -> SignMetrics:
    """Build a consistent metrics bundle from a few high-level inputs."""
    if bent is None:
        bent = tuple(not e for e in extended)

    gap_im, gap_mr, gap_rp = gaps
    mean = np.mean(gaps)
    return SignMetrics(
        gap_im=gap_im,
        gap_mr=gap_mr,
        gap_rp=gap_rp,
        spread_ratio=gap_mr / max((gap_im + gap_rp) / 2, thresholds.epsilon),
        cv=float(np.std(gaps) / mean) if mean > 0 else 1.0,
        thumb_to_index_mcp=thumb,
        thumb_out_hard=thumb > thresholds.thumb_out_hard,
        thumb_out_soft=thumb > thresholds.thumb_out_soft,
        thumb_along=thumb < thresholds.thumb_along,
        index_extended=extended[0],
        middle_extended=extended[1],
        ring_extended=extended[2],
        pinky_extended=extended[3],
        extended_count=sum(extended),
        index_bent=bent[0],
        middle_bent=bent[1],
        ring_bent=bent[2],
        pinky_bent=bent[3],
        cos_im=cos_im,
    )


ALL_EXTENDED = (True, True, True, True)
TWO_FINGERS = (True, True, False, False)


class TestSignThresholds:
    """Tests for SignThresholds dataclass."""

    def test_defaults(self):
        t = SignThresholds()
        assert t.extended_margin == 0.07
        assert t.bent_margin == 0.03
        assert t.thumb_out_hard == 0.33
        assert t.thumb_out_soft == 0.31
        assert t.thumb_along == 0.28

    def test_invalid_margins(self):
        """Test that the bent margin may not exceed the extended margin."""
        with pytest.raises(ValueError):
            SignThresholds(bent_margin=0.1)

    def test_invalid_thumb_bands(self):
        with pytest.raises(ValueError):
            SignThresholds(thumb_out_soft=0.4)

    def test_from_dict_ignores_unknown(self):
        t = SignThresholds.from_dict({'spock_ratio': 1.6, 'not_a_threshold': 3})

        assert t.spock_ratio == 1.6
        assert t.pair_tight == DEFAULTS.pair_tight

    def test_dict_round_trip(self):
        t = SignThresholds(paper_max_cv=0.4)
        assert SignThresholds.from_dict(t.to_dict()) == t


class TestSignClassifier:
    """Tests for SignClassifier class."""

    @pytest.fixture
    def classifier(self):
        return SignClassifier()

    def test_spock(self, classifier):
        """Test the V split with thumb out."""
        m = make_metrics(ALL_EXTENDED, gaps=(0.15, 0.35, 0.15), thumb=0.40)

        assert m.spread_ratio == pytest.approx(2.333, abs=1e-3)
        assert classifier.classify(m) == 'spock'
        assert classifier.match(m).name == 'spock_primary'

    def test_spock_soft_thumb(self, classifier):
        """Test that a borderline thumb still gives spock via the soft rule."""
        m = make_metrics(ALL_EXTENDED, gaps=(0.15, 0.35, 0.15), thumb=0.32)

        assert classifier.match(m).name == 'spock_soft'
        assert classifier.classify(m) == 'spock'

    def test_paper(self, classifier):
        """Test an evenly spread hand with thumb tucked."""
        m = make_metrics(ALL_EXTENDED, gaps=(0.2, 0.2, 0.2), thumb=0.20)

        assert classifier.classify(m) == 'paper'
        assert classifier.match(m).name == 'paper_strict'

    def test_paper_loose(self, classifier):
        """Test uneven but not V-shaped spacing falls back to loose paper."""
        m = make_metrics(ALL_EXTENDED, gaps=(0.12, 0.14, 0.28), thumb=0.20)

        assert m.cv >= DEFAULTS.paper_max_cv
        assert classifier.match(m).name == 'paper_loose'

    def test_wide_splay_is_not_paper(self, classifier):
        m = make_metrics(ALL_EXTENDED, gaps=(0.10, 0.12, 0.40), thumb=0.20)

        assert classifier.classify(m) == UNKNOWN

    def test_scissors(self, classifier):
        """Test two adjacent, parallel fingers."""
        m = make_metrics(TWO_FINGERS, gaps=(0.10, 0.3, 0.05), cos_im=0.95)

        assert classifier.classify(m) == 'scissors'

    def test_scissors_needs_parallel_fingers(self, classifier):
        m = make_metrics(TWO_FINGERS, gaps=(0.10, 0.3, 0.05), cos_im=0.5)

        assert classifier.classify(m) != 'scissors'

    def test_scissors_needs_bent_ring_and_pinky(self, classifier):
        """Test that an indeterminate ring finger blocks scissors."""
        m = make_metrics(TWO_FINGERS, bent=(False, False, False, True), gaps=(0.10, 0.3, 0.05), cos_im=0.95)

        assert classifier.classify(m) != 'scissors'

    def test_rock(self, classifier):
        m = make_metrics(gaps=(0.05, 0.05, 0.05), thumb=0.15)

        assert classifier.classify(m) == 'rock'

    def test_rock_tolerates_one_finger(self, classifier):
        m = make_metrics((False, False, False, True), thumb=0.15)

        assert classifier.classify(m) == 'rock'

    def test_lizard(self, classifier):
        m = make_metrics((True, False, False, False), thumb=0.40)

        assert classifier.classify(m) == 'lizard'
        assert classifier.match(m).name == 'lizard'

    def test_tiebreak_spock(self, classifier):
        """Test wide pairs with a V split and soft thumb."""
        m = make_metrics(ALL_EXTENDED, gaps=(0.30, 0.45, 0.30), thumb=0.32)

        assert classifier.match(m).name == 'tiebreak_spock'
        assert classifier.classify(m) == 'spock'

    def test_tiebreak_lizard(self, classifier):
        """Test two fingers that are not scissors, with thumb out."""
        m = make_metrics(TWO_FINGERS, bent=(False, False, False, False), thumb=0.35)

        assert classifier.match(m).name == 'tiebreak_lizard'
        assert classifier.classify(m) == 'lizard'

    def test_unknown(self, classifier):
        """Test an open hand with the thumb between the bands."""
        m = make_metrics(ALL_EXTENDED, gaps=(0.2, 0.2, 0.2), thumb=0.30)

        assert classifier.match(m) is None
        assert classifier.classify(m) == UNKNOWN

    def test_first_match_wins(self, classifier):
        """Test that scissors takes precedence over the lizard tie-breaker."""
        m = make_metrics(TWO_FINGERS, gaps=(0.10, 0.3, 0.05), thumb=0.40, cos_im=0.95)

        assert classifier.get_rule('tiebreak_lizard').predicate(m)
        assert classifier.get_rule('scissors').predicate(m)
        assert classifier.classify(m) == 'scissors'

    def test_rule_order(self, classifier):
        names = [rule.name for rule in classifier.rules]
        assert names == [
            'scissors', 'spock_primary', 'spock_soft', 'paper_strict', 'paper_loose',
            'rock', 'lizard', 'tiebreak_spock', 'tiebreak_lizard',
        ]

    def test_get_rule_missing(self, classifier):
        with pytest.raises(KeyError):
            classifier.get_rule('shaka')

    def test_totality(self, classifier):
        """Test that arbitrary metrics always map to a known label."""
        rng = np.random.default_rng(0)

        for _ in range(500):
            extended = tuple(bool(v) for v in rng.integers(0, 2, size=4))
            bent = tuple(not e and bool(v) for e, v in zip(extended, rng.integers(0, 2, size=4)))
            m = make_metrics(
                extended,
                bent=bent,
                gaps=tuple(rng.uniform(0, 0.6, size=3)),
                thumb=float(rng.uniform(0, 0.6)),
                cos_im=float(rng.uniform(-1, 1)),
            )
            assert classifier.classify(m) in ALL_LABELS

    def test_totality_on_poses(self, classifier):
        """Test that random and degenerate hands always map to a known label."""
        rng = np.random.default_rng(1)
        extractor = SignFeatureExtractor()

        poses = [HandPose(points=rng.uniform(0, 1, size=(NUM_LANDMARKS, 2))) for _ in range(300)]
        poses += [
            HandPose(points=np.zeros((NUM_LANDMARKS, 2))),
            HandPose(points=np.full((NUM_LANDMARKS, 2), 0.5)),
            HandPose(points=np.column_stack([np.full(NUM_LANDMARKS, 0.5), np.linspace(0, 1, NUM_LANDMARKS)])),
            HandPose(points=np.column_stack([np.linspace(0, 1, NUM_LANDMARKS), np.full(NUM_LANDMARKS, 0.5)])),
            HandPose(points=rng.uniform(0, 1e-9, size=(NUM_LANDMARKS, 2))),
            HandPose(points=rng.uniform(-5, 5, size=(NUM_LANDMARKS, 2))),
        ]

        for pose in poses:
            metrics = extractor.extract(pose)

            assert np.isfinite([metrics.spread_ratio, metrics.cv, metrics.cos_im]).all()
            assert classifier.classify(metrics) in ALL_LABELS

    def test_custom_thresholds(self):
        """Test that a one-finger fist is no longer rock when the limit is zero."""
        classifier = SignClassifier(SignThresholds(rock_max_extended=0))
        m = make_metrics((False, False, False, True), thumb=0.15)

        assert classifier.classify(m) == UNKNOWN

    @pytest.mark.parametrize("pose_name,label", [
        ("paper_pose", "paper"),
        ("rock_pose", "rock"),
        ("scissors_pose", "scissors"),
        ("spock_pose", "spock"),
        ("lizard_pose", "lizard"),
    ])
    def test_classify_poses(self, classifier, pose_name, label, request):
        """Test extraction and classification together on synthetic hands."""
        pose = request.getfixturevalue(pose_name)
        metrics = SignFeatureExtractor().extract(pose)

        assert classifier.classify(metrics) == label


class TestTemporalStabilizer:
    """Tests for TemporalStabilizer class."""

    def test_init_default(self):
        stabilizer = TemporalStabilizer()
        assert stabilizer.window_size == 5
        assert len(stabilizer) == 0
        assert stabilizer.current is None

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            TemporalStabilizer(window_size=0)

    def test_first_label(self):
        stabilizer = TemporalStabilizer()
        assert stabilizer.push('rock') == 'rock'
        assert stabilizer.current == 'rock'

    def test_majority(self):
        """Test that a single outlier does not change the output."""
        stabilizer = TemporalStabilizer()
        for label in ['paper', 'paper', 'paper', 'rock']:
            stable = stabilizer.push(label)

        assert stable == 'paper'

    def test_fifo_eviction(self):
        stabilizer = TemporalStabilizer(window_size=3)
        for label in ['a', 'a', 'b', 'b']:
            stable = stabilizer.push(label)

        assert stabilizer.history == ('a', 'b', 'b')
        assert stable == 'b'

    def test_full_window_overrides_history(self):
        """Test that window_size identical pushes fix the output."""
        stabilizer = TemporalStabilizer(window_size=5)
        for label in ['paper', 'spock', 'paper', 'unknown', 'paper']:
            stabilizer.push(label)

        for _ in range(5):
            stable = stabilizer.push('rock')

        assert stable == 'rock'
        assert stabilizer.history == ('rock',) * 5

    def test_tie_break(self):
        """Test that ties go to the earliest label in the window."""
        stabilizer = TemporalStabilizer(window_size=4)
        for label in ['a', 'b', 'a', 'b']:
            stable = stabilizer.push(label)

        assert stable == 'a'

    def test_independent_instances(self):
        first = TemporalStabilizer()
        second = TemporalStabilizer()

        first.push('rock')
        second.push('paper')

        assert first.history == ('rock',)
        assert second.history == ('paper',)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
