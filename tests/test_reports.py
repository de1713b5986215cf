"""
Tests for input records, storage, report rendering and the CLI.

Tests cover:
1. Input masks
2. Record parsing and batch CSV loading
3. JSON key-value store and AppData
4. Text and tabular reports
5. Charts and PDF export
6. Command line interface

Run with: python -m pytest tests/test_reports.py -v
"""

import json
from datetime import datetime, timezone

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd
import pytest

from core.engine import RaceAnalysisEngine
from core.models import ExperienceLevel, PersonalBest, RaceContext, RunnerProfile, SurfaceType
from core.post_race import generate_post_race_result
from data.masks import apply_mask, mask_field, mask_height, mask_long_time, mask_time
from data.records import (
    iter_input_records,
    load_records_csv,
    parse_input_record,
    records_to_inputs,
)
from data.storage import AppData, KeyValueStore
from analysis.reports import (
    generate_post_race_text,
    generate_race_report_text,
    report_to_frames,
    summarize_reports,
)
from analysis.visualizations import (
    export_report_pdf,
    plot_hydration_timeline,
    plot_projections,
    plot_segment_paces,
)
import main


FIXED_NOW = datetime(2024, 5, 1, 7, 30, tzinfo=timezone.utc)

SAMPLE_RECORD = {
    'raceName': 'City Half',
    'raceDistance': '21.0975',
    'raceType': 'Road',
    'tempMax': '24',
    'humidity': '60',
    'runnerAge': '42',
    'runnerExperience': 'Intermediate',
    'runnerWeight': '72.5',
    'runnerHeight': '1.78',
    'pb10k': '48:00',
    'pb21k': '1:50:00',
}


@pytest.fixture
def engine():
    return RaceAnalysisEngine(clock=lambda: FIXED_NOW)


@pytest.fixture
def inputs():
    return parse_input_record(SAMPLE_RECORD)


@pytest.fixture
def report(engine, inputs):
    return engine.generate_report(inputs.profile, inputs.race, inputs.personal_bests)


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / 'store.json'


# =============================================================================
# Mask Tests
# =============================================================================

class TestMasks:
    """Tests for raw field masks."""

    def test_time(self):
        assert mask_time('5000') == '50:00'
        assert mask_time('50:0a0') == '50:00'
        assert mask_time('5') == '5'

    def test_long_time(self):
        assert mask_long_time('13000') == '1:30:00'
        assert mask_long_time('150') == '1:50'

    def test_height(self):
        assert mask_height('175') == '1.75'
        assert mask_height('1,78') == '1.78'

    def test_numeric_limits(self):
        assert apply_mask('85%', 'percentage') == '85'
        assert apply_mask('1234', 'percentage') == '123'
        assert apply_mask('123', 'age') == '12'

    def test_race_name_truncated(self):
        assert len(apply_mask('x' * 80, 'raceName')) == 50

    def test_decimal_fields_untouched(self):
        assert mask_field('raceDistance', '21.0975') == '21.0975'
        assert mask_field('runnerWeight', '70.5') == '70.5'
        assert mask_field('tempMax', '-3') == '-3'

    def test_unknown_kind(self):
        assert apply_mask('abc', 'nothing') == 'abc'


# =============================================================================
# Record Tests
# =============================================================================

class TestRecords:
    """Tests for flat record parsing."""

    def test_parse_full_record(self, inputs):
        assert inputs.race_name == 'City Half'
        assert inputs.profile.age == 42
        assert inputs.profile.weight_kg == 72.5
        assert inputs.race.distance_km == '21.0975'
        assert inputs.race.surface == SurfaceType.ROAD
        assert [pb.label for pb in inputs.personal_bests] == ['10K', '21K']

    def test_personal_bests_need_colon(self):
        record = parse_input_record({'raceDistance': '10', 'pb5k': '25', 'pb10k': '50:00'})
        assert [pb.label for pb in record.personal_bests] == ['10K']

    def test_blank_weather_uses_defaults(self):
        record = parse_input_record({'raceDistance': '10', 'tempMax': '', 'humidity': 'x'})
        assert record.race.temp_max_c is None
        assert record.race.resolved_temp_c == 20
        assert record.race.resolved_humidity_pct == 50

    def test_legacy_values(self):
        record = parse_input_record({'raceType': 'Trilha', 'runnerExperience': 'Iniciante'})
        assert record.race.surface == SurfaceType.TRAIL
        assert record.profile.experience_level == ExperienceLevel.BEGINNER

    def test_decimal_comma(self):
        record = parse_input_record({'runnerHeight': '1,75'})
        assert record.profile.height_m == 1.75

    def test_load_csv(self, tmp_path):
        path = tmp_path / 'records.csv'
        path.write_text('raceName,raceDistance,pb10k\nA,10,50:00\nB,5,\n')
        df = load_records_csv(path)
        records = list(iter_input_records(df))
        assert records[0]['pb10k'] == '50:00'
        assert 'pb10k' not in records[1]
        assert len(records_to_inputs(df)) == 2

    def test_load_missing_csv(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_records_csv(tmp_path / 'missing.csv')


# =============================================================================
# Storage Tests
# =============================================================================

class TestKeyValueStore:
    """Tests for the JSON-file store."""

    def test_persists_across_instances(self, store_path):
        KeyValueStore(store_path).set('raceDistance', '10')
        assert KeyValueStore(store_path).get('raceDistance') == '10'

    def test_prefix(self, store_path):
        KeyValueStore(store_path).set('a', 1)
        raw = json.loads(store_path.read_text())
        assert raw == {'runner_analysis_a': 1}

    def test_clear_only_own_prefix(self, store_path):
        KeyValueStore(store_path, prefix='other_').set('a', 1)
        store = KeyValueStore(store_path)
        store.set('a', 2)
        store.clear()
        assert store.get('a') is None
        assert KeyValueStore(store_path, prefix='other_').get('a') == 1

    def test_corrupt_file(self, store_path, capsys):
        store_path.write_text('{not json')
        store = KeyValueStore(store_path)
        assert store.get('a', 'default') == 'default'
        assert 'Warning' in capsys.readouterr().out


class TestAppData:
    """Tests for stored input fields."""

    def test_defaults(self, store_path):
        app = AppData(KeyValueStore(store_path))
        assert app.get('raceType') == 'Road'
        assert app.get('runnerExperience') == 'Intermediate'
        assert app.get('analysis') is None

    def test_validation(self, store_path):
        app = AppData(KeyValueStore(store_path))
        result = app.validate_required_data()
        assert not result['is_valid']
        assert 'Race distance is required' in result['errors']

        app.set('raceDistance', '250')
        assert not app.validate_required_data()['is_valid']

        app.set('raceDistance', '0')
        assert not app.validate_required_data()['is_valid']

        app.set('raceDistance', '10')
        assert app.validate_required_data() == {'is_valid': True, 'errors': []}

    def test_validation_accepts_sub_kilometre(self, store_path):
        app = AppData(KeyValueStore(store_path))
        app.set('raceDistance', '0.5')
        assert app.validate_required_data() == {'is_valid': True, 'errors': []}

    def test_summary(self, store_path):
        app = AppData(KeyValueStore(store_path))
        app.set('raceName', 'City 10K')
        app.set('raceDistance', '10')
        summary = app.get_data_summary()
        assert summary['filled'] == ['Race Name', 'Distance']
        assert summary['completeness'] == 33

    def test_report_round_trip(self, store_path, report):
        AppData(KeyValueStore(store_path)).save_report(report)
        loaded = AppData(KeyValueStore(store_path)).load_report()
        assert loaded.to_dict() == report.to_dict()

    def test_unreadable_report(self, store_path, capsys):
        app = AppData(KeyValueStore(store_path))
        app.set('analysis', {'unexpected': True})
        assert app.load_report() is None
        assert 'Warning' in capsys.readouterr().out

    def test_reset(self, store_path):
        app = AppData(KeyValueStore(store_path))
        app.set('raceDistance', '10')
        app.reset()
        assert app.get('raceDistance') == ''
        assert AppData(KeyValueStore(store_path)).get('raceDistance') == ''


# =============================================================================
# Report Rendering Tests
# =============================================================================

class TestTextReports:
    """Tests for text rendering."""

    def test_race_report_sections(self, report, inputs):
        text = generate_race_report_text(report, inputs)
        for heading in ['RACE INFORMATION', 'HEALTH AND SAFETY', 'TIME ESTIMATES',
                        'PERFORMANCE PROJECTIONS', 'PACING STRATEGY BY SEGMENT',
                        'HYDRATION AND NUTRITION PLAN', 'EQUIPMENT']:
            assert heading in text
        assert 'City Half' in text
        assert report.time_estimate.realistic in text

    def test_report_without_inputs_or_estimate(self, engine):
        report = engine.generate_report(
            RunnerProfile(), RaceContext(distance_km=5), [PersonalBest(5.0, '0:00', '5K')]
        )
        text = generate_race_report_text(report)
        assert 'RACE INFORMATION' not in text
        assert 'TIME ESTIMATES' not in text

    def test_no_data_recommendation(self, engine):
        report = engine.generate_report(RunnerProfile(), RaceContext(distance_km=10))
        assert 'Enter at least one personal best' in generate_race_report_text(report)

    def test_post_race_text(self, report):
        result = generate_post_race_result(report, '1:40:00', clock=lambda: FIXED_NOW)
        text = generate_post_race_text(result)
        assert 'POST-RACE ANALYSIS' in text
        assert result.feedback in text


class TestFrames:
    """Tests for tabular output."""

    def test_report_frames(self, report):
        frames = report_to_frames(report)
        assert set(frames) == {'projections', 'segments', 'hydration'}
        assert len(frames['segments']) == len(report.segment_strategy)
        assert len(frames['hydration']) == len(report.hydration_plan)
        assert list(frames['projections']['label']) == ['5K', '10K', '21K', '42K']

    def test_empty_sections_keep_columns(self, engine):
        report = engine.generate_report(RunnerProfile(), RaceContext(distance_km=10))
        frames = report_to_frames(report)
        assert frames['projections'].empty
        assert 'confidence' in frames['projections'].columns

    def test_summarize(self, engine, report):
        other = engine.generate_report(RunnerProfile(), RaceContext(distance_km=10))
        summary = summarize_reports([report, other], ['half', 'ten'])
        assert list(summary.index) == ['half', 'ten']
        assert summary.loc['ten', 'realistic'] == '1:00:00'
        assert summary.loc['half', 'segments'] == len(report.segment_strategy)

    def test_summarize_default_names(self, report):
        assert list(summarize_reports([report]).index) == ['runner_1']

    def test_summarize_empty(self):
        assert summarize_reports([]).empty


# =============================================================================
# Visualization Tests
# =============================================================================

class TestVisualizations:
    """Tests for charts and PDF export."""

    def test_plots_return_figures(self, report):
        for plot in [plot_segment_paces, plot_projections, plot_hydration_timeline]:
            fig = plot(report)
            assert isinstance(fig, plt.Figure)
            plt.close(fig)

    def test_projection_plot_without_data(self, engine):
        report = engine.generate_report(RunnerProfile(), RaceContext(distance_km=10))
        fig = plot_projections(report)
        assert isinstance(fig, plt.Figure)
        plt.close(fig)

    def test_export_pdf(self, tmp_path, report, inputs):
        path = export_report_pdf(report, tmp_path / 'out' / 'report.pdf', inputs)
        assert path.exists()
        assert path.read_bytes().startswith(b'%PDF')


# =============================================================================
# CLI Tests
# =============================================================================

class TestCLI:
    """Tests for the command line interface."""

    def run(self, store_path, *args):
        return main.main(['--store', str(store_path), *args])

    def test_no_command(self, capsys):
        assert main.main([]) == 0
        assert 'usage' in capsys.readouterr().out.lower()

    def test_set_masks_value(self, store_path, capsys):
        assert self.run(store_path, 'set', 'pb10k', '5000') == 0
        assert 'pb10k = 50:00' in capsys.readouterr().out

    def test_set_unknown_field(self, store_path, capsys):
        assert self.run(store_path, 'set', 'shoeSize', '42') == 1
        assert 'Unknown field' in capsys.readouterr().out

    def test_analyze_requires_distance(self, store_path, capsys):
        assert self.run(store_path, 'analyze') == 1
        assert 'Race distance is required' in capsys.readouterr().out

    def test_analyze_sub_kilometre_race(self, store_path, capsys):
        """A 0.5 km race at the default 6:00/km pace."""
        assert self.run(store_path, 'set', 'raceDistance', '0.5') == 0
        assert self.run(store_path, 'analyze') == 0
        out = capsys.readouterr().out
        assert 'Error' not in out
        realistic = [line for line in out.splitlines() if line.startswith('Realistic:')]
        assert realistic[0].split()[-1] == '3:00'

    def test_full_flow(self, store_path, tmp_path, capsys):
        assert self.run(store_path, 'set', 'raceDistance', '10') == 0
        assert self.run(store_path, 'set', 'pb10k', '50:00') == 0
        assert self.run(store_path, 'show') == 0
        assert 'Saved analysis: no' in capsys.readouterr().out

        pdf = tmp_path / 'report.pdf'
        assert self.run(store_path, 'analyze', '--pdf', str(pdf)) == 0
        out = capsys.readouterr().out
        assert 'Realistic:' in out
        assert pdf.exists()

        assert self.run(store_path, 'post-race', '48:20') == 0
        assert 'Exceptional performance' in capsys.readouterr().out

        assert self.run(store_path, 'reset') == 0
        assert self.run(store_path, 'post-race', '48:20') == 1

    def test_post_race_without_report(self, store_path, capsys):
        assert self.run(store_path, 'post-race', '50:00') == 1
        assert 'Pre-race analysis not found' in capsys.readouterr().out

    def test_params_file(self, store_path, tmp_path, capsys):
        params = tmp_path / 'params.json'
        params.write_text(json.dumps({'default_pace': '5:30'}))
        self.run(store_path, 'set', 'raceDistance', '10')
        assert main.main(['--store', str(store_path), '--params', str(params), 'analyze']) == 0
        assert 'Base pace: 5:30/km' in capsys.readouterr().out

    def test_batch(self, tmp_path, capsys):
        records = tmp_path / 'records.csv'
        records.write_text(
            'raceName,raceDistance,runnerAge,pb10k\n'
            'City 10K,10,30,50:00\n'
            'Trail Half,21.0975,45,\n'
            'Broken,,30,\n'
        )
        out = tmp_path / 'summary.csv'
        assert main.main(['--store', str(tmp_path / 's.json'), '--verbose',
                          'batch', str(records), '--out', str(out)]) == 0
        assert 'Skipping Broken' in capsys.readouterr().out

        summary = pd.read_csv(out, index_col='name')
        assert list(summary.index) == ['City 10K', 'Trail Half']
        assert summary.loc['City 10K', 'realistic'] == '50:00'
