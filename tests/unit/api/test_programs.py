"""
Unit Tests for Program Endpoints
"""
import pytest
from httpx import AsyncClient

BASE = '/api/v1/programs'


class TestPrograms:
    """Public reads, admin writes"""

    @pytest.mark.asyncio
    async def test_create_and_list(self, client: AsyncClient, admin_headers):
        await client.post(BASE, json={'name': 'STEM', 'department': 'senior-high'}, headers=admin_headers)
        await client.post(BASE, json={'name': 'BS Nursing', 'department': 'college'}, headers=admin_headers)
        await client.post(BASE, json={'name': 'ABM', 'department': 'senior-high'}, headers=admin_headers)

        everything = await client.get(BASE)
        senior_high = await client.get(BASE, params={'department': 'senior-high'})

        assert [p['name'] for p in everything.json()] == ['BS Nursing', 'ABM', 'STEM']
        assert [p['name'] for p in senior_high.json()] == ['ABM', 'STEM']

    @pytest.mark.asyncio
    async def test_active_only(self, client: AsyncClient, admin_headers):
        await client.post(BASE, json={'name': 'Old Track', 'department': 'college', 'isActive': False},
                          headers=admin_headers)
        await client.post(BASE, json={'name': 'New Track', 'department': 'college'}, headers=admin_headers)

        response = await client.get(BASE, params={'activeOnly': 'true'})

        assert [p['name'] for p in response.json()] == ['New Track']

    @pytest.mark.asyncio
    async def test_duplicate_in_department(self, client: AsyncClient, admin_headers):
        await client.post(BASE, json={'name': 'STEM', 'department': 'senior-high'}, headers=admin_headers)

        same = await client.post(BASE, json={'name': 'stem', 'department': 'senior-high'}, headers=admin_headers)
        other = await client.post(BASE, json={'name': 'STEM', 'department': 'college'}, headers=admin_headers)

        assert same.status_code == 400
        assert same.json()['code'] == 'DUPLICATE_RESOURCE'
        assert other.status_code == 201

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client: AsyncClient, admin_headers):
        created = await client.post(BASE, json={'name': 'HUMSS', 'department': 'senior-high'}, headers=admin_headers)
        program_id = created.json()['id']

        updated = await client.put(f'{BASE}/{program_id}', json={'description': 'Humanities'}, headers=admin_headers)
        deleted = await client.delete(f'{BASE}/{program_id}', headers=admin_headers)
        missing = await client.get(f'{BASE}/{program_id}')

        assert updated.json()['description'] == 'Humanities'
        assert updated.json()['name'] == 'HUMSS'
        assert deleted.status_code == 200
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_writes_need_admin(self, client: AsyncClient, assistant_headers):
        response = await client.post(BASE, json={'name': 'STEM', 'department': 'senior-high'}, headers=assistant_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_department(self, client: AsyncClient, admin_headers):
        response = await client.post(BASE, json={'name': 'Masters', 'department': 'graduate'}, headers=admin_headers)

        assert response.status_code == 400
