"""
Tests for CSV/JSON export and the full backup.
"""

import pytest

from utils.csv_export import export_filename, session_row, sessions_to_csv
from exceptions import ValidationError


class TestCsvBuilder:
    def test_header_and_rows(self):
        content = sessions_to_csv(
            [
                {
                    'charged_at': '2026-10-18T09:30:00.000Z',
                    'cost': 1350.0,
                    'start_percent': 20,
                    'end_percent': 80,
                    'kwh': 45.0,
                    'charge_type': 'level2',
                },
                {'charged_at': '2026-10-17T09:30:00.000Z', 'cost': None, 'start_percent': 30,
                 'end_percent': None, 'kwh': None, 'charge_type': None},
            ],
            'JPY',
        )

        lines = content.split('\n')
        assert lines[0] == 'Date,Cost (JPY),Start %,End %,kWh,Type'
        assert lines[1] == '2026-10-18T09:30:00.000Z,1350,20,80,45,level2'
        assert lines[2] == '2026-10-17T09:30:00.000Z,,30,,,standard'

    def test_fractional_values_kept(self):
        row = session_row({'charged_at': '2026-10-18T09:30:00.000Z', 'cost': 12.5, 'start_percent': 20,
                           'end_percent': 50, 'kwh': 22.35, 'charge_type': 'ccs'})
        assert row == '2026-10-18T09:30:00.000Z,12.5,20,50,22.35,ccs'

    def test_empty_export_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            sessions_to_csv([], 'JPY')
        assert exc_info.value.message == 'No data'

    def test_filename(self):
        from datetime import date

        assert export_filename(date(2026, 10, 18)) == 'ev_charging_data_2026-10-18.csv'


class TestExportRoutes:
    def test_csv_download(self, client):
        client.put('/api/settings', json={'currency': 'USD'})
        client.post('/api/charging/add', json={'start_percent': 20, 'end_percent': 80, 'cost': 12})

        response = client.get('/api/export/sessions')

        assert response.status_code == 200
        assert response.mimetype == 'text/csv'
        assert 'filename=ev_charging_data_' in response.headers['Content-Disposition']
        assert response.get_data(as_text=True).startswith('Date,Cost (USD),Start %,End %,kWh,Type\n')

    def test_csv_no_data(self, client):
        response = client.get('/api/export/sessions')

        assert response.status_code == 400
        assert response.get_json() == {'error': 'No data', 'code': 'E402'}

    def test_json_format(self, client, auth_headers):
        client.post('/api/charging/add', json={'start_percent': 20, 'end_percent': 80}, headers=auth_headers)

        response = client.get('/api/export/sessions?format=json', headers=auth_headers)

        assert response.status_code == 200
        assert len(response.get_json()) == 1

    def test_backup(self, client):
        client.post('/api/charging/add', json={'start_percent': 20, 'end_percent': 80})
        client.post('/api/expenses/add', json={'title': 'Wipers', 'amount': 2000})

        backup = client.get('/api/export/all').get_json()

        assert backup['mode'] == 'guest'
        assert backup['counts'] == {'charging_sessions': 1, 'vehicle_expenses': 1}
        assert backup['profile']['currency'] == 'JPY'
        assert backup['export_date'].endswith('Z')
