"""
Unit Tests for Thesis API Endpoints
"""
import json

import pytest
from httpx import AsyncClient

from thesis_archive.core.config import settings
from thesis_archive.models.thesis import ThesisStatus

BASE = '/api/v1/thesis'


class TestThesisListing:
    """Test public listing endpoints"""

    @pytest.mark.asyncio
    async def test_list_empty(self, client: AsyncClient):
        response = await client.get(BASE)

        assert response.status_code == 200
        assert response.json() == {'data': [], 'total': 0, 'page': 1, 'limit': 10, 'totalPages': 0}

    @pytest.mark.asyncio
    async def test_list_shape_is_camel_case(self, client: AsyncClient, make_thesis):
        await make_thesis(title='Rice Yield Forecasting', shelf_location='Shelf 2A', pdf_url='/uploads/a.pdf')

        response = await client.get(BASE)

        item = response.json()['data'][0]
        assert item['title'] == 'Rice Yield Forecasting'
        assert item['shelfLocation'] == 'Shelf 2A'
        assert item['pdfUrl'] == '/uploads/a.pdf'
        assert isinstance(item['authors'], list)
        assert 'createdAt' in item

    @pytest.mark.asyncio
    async def test_paging_parameters_are_coerced(self, client: AsyncClient, make_thesis):
        for i in range(3):
            await make_thesis(title=f'Study {i}')

        response = await client.get(BASE, params={'page': 'abc', 'limit': '2'})

        body = response.json()
        assert body['page'] == 1
        assert body['limit'] == 2
        assert body['total'] == 3
        assert body['totalPages'] == 2
        assert len(body['data']) == 2

    @pytest.mark.asyncio
    async def test_page_beyond_end(self, client: AsyncClient, make_thesis):
        await make_thesis()

        response = await client.get(BASE, params={'page': '5'})

        assert response.status_code == 200
        assert response.json()['data'] == []

    @pytest.mark.asyncio
    async def test_huge_page_is_empty_not_an_error(self, client: AsyncClient, make_thesis):
        await make_thesis()

        response = await client.get(BASE, params={'page': '99999999999999999999'})

        assert response.status_code == 200
        assert response.json()['data'] == []
        assert response.json()['total'] == 1

    @pytest.mark.asyncio
    async def test_huge_limit_is_capped(self, client: AsyncClient, make_thesis):
        await make_thesis()

        response = await client.get(BASE, params={'limit': '99999999999999999999'})

        assert response.status_code == 200
        assert response.json()['limit'] == settings.MAX_PAGE_SIZE
        assert len(response.json()['data']) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize('year', ['99999999999999999999', '1200'])
    async def test_year_filter_out_of_range_is_400(self, client: AsyncClient, year):
        response = await client.get(BASE, params={'year': year})

        assert response.status_code == 400
        assert 'Year must be between' in response.json()['error']

    @pytest.mark.asyncio
    async def test_my_submissions_huge_page(self, client: AsyncClient, student_headers):
        response = await client.get(
            f'{BASE}/my-submissions', params={'page': '99999999999999999999'}, headers=student_headers
        )

        assert response.status_code == 200
        assert response.json()['data'] == []

    @pytest.mark.asyncio
    async def test_filters_from_query(self, client: AsyncClient, make_thesis):
        await make_thesis(title='Kept', department='senior-high', year=2021, program='STEM')
        await make_thesis(title='Other year', department='senior-high', year=2020, program='STEM')
        await make_thesis(title='Other dept', department='college', year=2021)

        response = await client.get(BASE, params={
            'department': 'senior-high', 'year': '2021', 'program': 'STEM', 'search': '',
        })

        assert [t['title'] for t in response.json()['data']] == ['Kept']

    @pytest.mark.asyncio
    async def test_non_numeric_year_is_400(self, client: AsyncClient):
        response = await client.get(BASE, params={'year': 'latest'})

        assert response.status_code == 400
        assert response.json()['code'] == 'VALIDATION_ERROR'
        assert 'Year must be a number' in response.json()['error']

    @pytest.mark.asyncio
    async def test_unknown_department_is_400(self, client: AsyncClient):
        response = await client.get(BASE, params={'department': 'graduate'})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_get_by_id(self, client: AsyncClient, make_thesis):
        thesis = await make_thesis(title='Found Me')

        response = await client.get(f'{BASE}/{thesis.id}')

        assert response.status_code == 200
        assert response.json()['id'] == thesis.id

    @pytest.mark.asyncio
    async def test_get_missing_is_404(self, client: AsyncClient):
        response = await client.get(f'{BASE}/does-not-exist')

        assert response.status_code == 404
        assert response.json()['error'] == 'Thesis not found'

    @pytest.mark.asyncio
    async def test_unique_years(self, client: AsyncClient, make_thesis):
        await make_thesis(year=2020)
        await make_thesis(year=2022)
        await make_thesis(year=2022, department='senior-high')
        await make_thesis(year=None)

        response = await client.get(f'{BASE}/years/unique')
        scoped = await client.get(f'{BASE}/years/unique', params={'department': 'senior-high'})

        assert response.json() == [2022, 2020]
        assert scoped.json() == [2022]


class TestThesisCreation:
    """Test staff create and student submit"""

    @pytest.mark.asyncio
    async def test_admin_create_is_approved(self, client: AsyncClient, admin_headers, pdf_file):
        form = {
            'title': 'Flood Mapping',
            'department': 'college',
            'year': '2023',
            'authors': json.dumps([{'id': '1', 'name': 'Ana Cruz'}]),
            'shelfLocation': 'Shelf 1',
        }

        response = await client.post(BASE, data=form, files={'pdf': pdf_file}, headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body['status'] == 'approved'
        assert body['year'] == 2023
        assert body['authors'] == [{'id': '1', 'name': 'Ana Cruz'}]
        assert body['pdfUrl'].startswith(settings.UPLOAD_URL_PREFIX + '/')
        stored = settings.UPLOAD_DIR / body['pdfUrl'].rsplit('/', 1)[-1]
        assert stored.exists()

    @pytest.mark.asyncio
    async def test_assistant_may_create(self, client: AsyncClient, assistant_headers):
        response = await client.post(BASE, data={'title': 'T', 'department': 'college'}, headers=assistant_headers)

        assert response.status_code == 201
        assert response.json()['status'] == 'approved'

    @pytest.mark.asyncio
    async def test_student_cannot_use_staff_create(self, client: AsyncClient, student_headers):
        response = await client.post(BASE, data={'title': 'T', 'department': 'college'}, headers=student_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_title_and_department_required(self, client: AsyncClient, admin_headers):
        response = await client.post(BASE, data={'title': 'Only title'}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()['error'] == 'Title and department are required'

    @pytest.mark.asyncio
    async def test_invalid_year_rejected(self, client: AsyncClient, admin_headers):
        response = await client.post(
            BASE, data={'title': 'T', 'department': 'college', 'year': '1850'}, headers=admin_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_authors_rejected(self, client: AsyncClient, admin_headers):
        response = await client.post(
            BASE, data={'title': 'T', 'department': 'college', 'authors': '[not json'}, headers=admin_headers
        )

        assert response.status_code == 400
        assert 'authors' in response.json()['error']

    @pytest.mark.asyncio
    async def test_non_pdf_upload_rejected(self, client: AsyncClient, admin_headers):
        files = {'pdf': ('notes.txt', b'plain text', 'text/plain')}

        response = await client.post(
            BASE, data={'title': 'T', 'department': 'college'}, files=files, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_FILE_TYPE'

    @pytest.mark.asyncio
    async def test_submit_is_pending_and_owned(self, client: AsyncClient, student_user, student_headers):
        response = await client.post(
            f'{BASE}/submit', data={'title': 'A Study', 'department': 'college'}, headers=student_headers
        )

        assert response.status_code == 201
        body = response.json()
        assert body['status'] == 'pending'
        assert body['year'] is None
        assert body['shelfLocation'] == 'N/A'
        assert body['submittedBy'] == student_user.id

    @pytest.mark.asyncio
    async def test_submit_requires_login(self, client: AsyncClient):
        response = await client.post(f'{BASE}/submit', data={'title': 'A Study', 'department': 'college'})

        assert response.status_code == 401
        assert response.json()['code'] == 'AUTH_FAILED'

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, client: AsyncClient):
        response = await client.post(
            f'{BASE}/submit',
            data={'title': 'A Study', 'department': 'college'},
            headers={'Authorization': 'Bearer nonsense'},
        )

        assert response.status_code == 401


class TestApprovalWorkflow:
    """Test approve / reject"""

    @pytest.mark.asyncio
    async def test_submit_approve_then_visible(self, client: AsyncClient, student_headers, admin_headers):
        submitted = await client.post(
            f'{BASE}/submit', data={'title': 'A Study', 'department': 'college'}, headers=student_headers
        )
        thesis_id = submitted.json()['id']

        approved = await client.put(f'{BASE}/{thesis_id}/approve', headers=admin_headers)
        listing = await client.get(BASE)

        assert approved.status_code == 200
        assert approved.json()['message'] == 'Thesis approved successfully'
        assert approved.json()['thesis']['status'] == 'approved'
        assert thesis_id in [t['id'] for t in listing.json()['data']]

    @pytest.mark.asyncio
    async def test_repeated_approve_is_refused(self, client: AsyncClient, make_thesis, assistant_headers):
        thesis = await make_thesis(status=ThesisStatus.PENDING)

        first = await client.put(f'{BASE}/{thesis.id}/approve', headers=assistant_headers)
        second = await client.put(f'{BASE}/{thesis.id}/approve', headers=assistant_headers)
        current = await client.get(f'{BASE}/{thesis.id}')

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()['code'] == 'INVALID_STATUS_TRANSITION'
        assert current.json()['status'] == 'approved'

    @pytest.mark.asyncio
    async def test_reject_pending(self, client: AsyncClient, make_thesis, admin_headers):
        thesis = await make_thesis(status=ThesisStatus.PENDING)

        response = await client.put(f'{BASE}/{thesis.id}/reject', headers=admin_headers)

        assert response.status_code == 200
        assert response.json()['thesis']['status'] == 'rejected'

    @pytest.mark.asyncio
    async def test_cannot_approve_rejected(self, client: AsyncClient, make_thesis, admin_headers):
        thesis = await make_thesis(status=ThesisStatus.REJECTED)

        response = await client.put(f'{BASE}/{thesis.id}/approve', headers=admin_headers)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_student_cannot_approve(self, client: AsyncClient, make_thesis, student_headers):
        thesis = await make_thesis(status=ThesisStatus.PENDING)

        response = await client.put(f'{BASE}/{thesis.id}/approve', headers=student_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_approve_missing_is_404(self, client: AsyncClient, admin_headers):
        response = await client.put(f'{BASE}/missing/approve', headers=admin_headers)

        assert response.status_code == 404


class TestOwnershipGate:
    """Test update / delete permissions"""

    @pytest.mark.asyncio
    async def test_owner_updates_pending(self, client: AsyncClient, make_thesis, student_user, student_headers):
        thesis = await make_thesis(status=ThesisStatus.PENDING, submitted_by=student_user.id, year=2021)

        response = await client.put(f'{BASE}/{thesis.id}', data={'title': 'Revised'}, headers=student_headers)

        assert response.status_code == 200
        body = response.json()
        assert body['title'] == 'Revised'
        assert body['year'] == 2021

    @pytest.mark.asyncio
    async def test_other_student_refused(self, client: AsyncClient, make_thesis, student_user, other_student_headers):
        thesis = await make_thesis(status=ThesisStatus.PENDING, submitted_by=student_user.id)

        response = await client.put(f'{BASE}/{thesis.id}', data={'title': 'Hijack'}, headers=other_student_headers)

        assert response.status_code == 403
        assert response.json()['error'] == 'You can only edit your own submissions'

    @pytest.mark.asyncio
    async def test_owner_refused_after_approval(self, client: AsyncClient, make_thesis, student_user, student_headers):
        thesis = await make_thesis(status=ThesisStatus.APPROVED, submitted_by=student_user.id)

        update = await client.put(f'{BASE}/{thesis.id}', data={'title': 'Late'}, headers=student_headers)
        delete = await client.delete(f'{BASE}/{thesis.id}', headers=student_headers)

        assert update.status_code == 403
        assert update.json()['error'] == 'You can only edit pending submissions'
        assert delete.status_code == 403

    @pytest.mark.asyncio
    async def test_staff_updates_any(self, client: AsyncClient, make_thesis, assistant_headers):
        thesis = await make_thesis(status=ThesisStatus.APPROVED)

        response = await client.put(
            f'{BASE}/{thesis.id}', data={'shelfLocation': 'Shelf 9', 'program': ''}, headers=assistant_headers
        )

        assert response.status_code == 200
        assert response.json()['shelfLocation'] == 'Shelf 9'
        assert response.json()['program'] is None

    @pytest.mark.asyncio
    async def test_empty_fields_clear_stored_values(self, client: AsyncClient, make_thesis, admin_headers, pdf_file):
        thesis = await make_thesis(year=2021, abstract='Old abstract', shelf_location='Shelf 3', program='STEM')

        response = await client.put(
            f'{BASE}/{thesis.id}',
            data={'year': '', 'abstract': '', 'shelfLocation': '', 'advisors': ''},
            files={'pdf': pdf_file},
            headers=admin_headers,
        )

        body = response.json()
        assert response.status_code == 200
        assert body['year'] is None
        assert body['abstract'] is None
        assert body['shelfLocation'] is None
        assert body['advisors'] == []
        assert body['program'] == 'STEM'

    @pytest.mark.asyncio
    async def test_empty_title_is_rejected(self, client: AsyncClient, make_thesis, admin_headers):
        thesis = await make_thesis(title='Keep Me')

        response = await client.put(f'{BASE}/{thesis.id}', data={'title': ''}, headers=admin_headers)

        assert response.status_code == 400
        assert (await client.get(f'{BASE}/{thesis.id}')).json()['title'] == 'Keep Me'

    @pytest.mark.asyncio
    async def test_update_without_fields_is_400(self, client: AsyncClient, make_thesis, admin_headers):
        thesis = await make_thesis()

        response = await client.put(f'{BASE}/{thesis.id}', headers=admin_headers)

        assert response.status_code == 400
        assert response.json()['error'] == 'No fields to update'

    @pytest.mark.asyncio
    async def test_update_replaces_pdf(self, client: AsyncClient, make_thesis, admin_headers, pdf_file):
        thesis = await make_thesis(pdf_url=None)

        response = await client.put(f'{BASE}/{thesis.id}', files={'pdf': pdf_file}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()['pdfUrl'].endswith('.pdf')

    @pytest.mark.asyncio
    async def test_update_missing_is_404(self, client: AsyncClient, admin_headers):
        response = await client.put(f'{BASE}/missing', data={'title': 'X'}, headers=admin_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_owner_deletes_pending_and_file(self, client: AsyncClient, student_headers, pdf_file):
        created = await client.post(
            f'{BASE}/submit',
            data={'title': 'Short Lived', 'department': 'college'},
            files={'pdf': pdf_file},
            headers=student_headers,
        )
        body = created.json()
        stored = settings.UPLOAD_DIR / body['pdfUrl'].rsplit('/', 1)[-1]
        assert stored.exists()

        response = await client.delete(f'{BASE}/{body["id"]}', headers=student_headers)

        assert response.status_code == 200
        assert response.json()['message'] == 'Thesis deleted successfully'
        assert not stored.exists()
        assert (await client.get(f'{BASE}/{body["id"]}')).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_with_missing_file_still_succeeds(self, client: AsyncClient, make_thesis, admin_headers):
        thesis = await make_thesis(pdf_url='/uploads/already-gone.pdf')

        response = await client.delete(f'{BASE}/{thesis.id}', headers=admin_headers)

        assert response.status_code == 200


class TestMySubmissions:
    """Test the caller's own submission list"""

    @pytest.mark.asyncio
    async def test_only_own_rows(self, client: AsyncClient, make_thesis, student_user, other_student, student_headers):
        await make_thesis(title='Mine', submitted_by=student_user.id, status=ThesisStatus.PENDING)
        await make_thesis(title='Theirs', submitted_by=other_student.id, status=ThesisStatus.PENDING)

        response = await client.get(f'{BASE}/my-submissions', headers=student_headers)

        body = response.json()
        assert response.status_code == 200
        assert [t['title'] for t in body['data']] == ['Mine']
        assert body['total'] == 1

    @pytest.mark.asyncio
    async def test_requires_login(self, client: AsyncClient):
        response = await client.get(f'{BASE}/my-submissions')

        assert response.status_code == 401
