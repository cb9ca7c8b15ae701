from school_api import models
from school_api.config import settings
from school_api.repositories import StudentRepository
from school_api.routes import MAX_PAGE_NUMBER
from school_api.services import StudentService


def test_save_get_delete_scenario(client):
    r = client.post('/students/save', json={'firstName': 'Ann', 'lastName': 'Lee', 'age': 20, 'email': 'ann@x.com'})
    assert r.status_code == 200
    body = r.json()
    assert body['message'] == 'Student was saved to DB'
    sid = body['id']

    r = client.get(f'/students/{sid}')
    assert r.status_code == 200
    assert r.json() == {
        'id': sid,
        'firstName': 'Ann',
        'lastName': 'Lee',
        'age': 20,
        'email': 'ann@x.com',
        'specialization': None,
        'teachers': [],
    }

    assert client.delete(f'/students/{sid}').status_code == 200
    r = client.get(f'/students/{sid}')
    assert r.status_code == 404
    assert r.json()['detail'] == f'Student not found for id :: {sid}'


def test_list_all_on_empty_store_is_404(client):
    assert client.get('/students/all').status_code == 404


def test_list_all_returns_every_student(client, make_student):
    make_student(firstName='Ann')
    make_student(firstName='Bob')
    r = client.get('/students/all')
    assert r.status_code == 200
    assert [s['firstName'] for s in r.json()] == ['Ann', 'Bob']


def test_unknown_id_is_404_for_get_update_delete(client):
    payload = {'firstName': 'Ann', 'lastName': 'Lee', 'age': 20, 'email': 'ann@x.com'}
    assert client.get('/students/999').status_code == 404
    assert client.put('/students/999', json=payload).status_code == 404
    assert client.delete('/students/999').status_code == 404
    assert client.get('/students/999/getTeachers').status_code == 404


def test_filter_by_first_and_last_name(client, make_student):
    make_student(firstName='Ann', lastName='Lee')
    make_student(firstName='Ann', lastName='Kim')
    make_student(firstName='Bob', lastName='Lee')

    r = client.get('/students/filterByFirstName/Ann')
    assert r.status_code == 200
    assert sorted(s['lastName'] for s in r.json()) == ['Kim', 'Lee']

    r = client.get('/students/filterByLastName/Lee')
    assert r.status_code == 200
    assert sorted(s['firstName'] for s in r.json()) == ['Ann', 'Bob']

    # exact match only
    assert client.get('/students/filterByFirstName/An').status_code == 404
    assert client.get('/students/filterByLastName/Nobody').status_code == 404


def test_paged_listing(client, make_student):
    for name in ('Cara', 'Abel', 'Bert', 'Dina', 'Emil'):
        make_student(firstName=name)
    r = client.get('/students/all/1/2')
    assert r.status_code == 200
    page = r.json()
    assert page['pageNumber'] == 1
    assert page['pageSize'] == 2
    assert page['totalElements'] == 5
    assert page['totalPages'] == 3
    assert page['numberOfElements'] == 2
    assert page['first'] is False
    assert page['last'] is False

    last = client.get('/students/all/2/2').json()
    assert last['numberOfElements'] == 1
    assert last['last'] is True


def test_paged_listing_sorted_by_last_name(client, make_student):
    for last_name in ('Young', 'Adams', 'Moore'):
        make_student(lastName=last_name)
    r = client.get('/students/all/0/10/lastName')
    assert r.status_code == 200
    assert [s['lastName'] for s in r.json()['content']] == ['Adams', 'Moore', 'Young']


def test_paged_listing_sorted_by_id(client, make_student):
    ids = [make_student(lastName=n) for n in ('Young', 'Adams', 'Moore')]
    r = client.get('/students/all/0/10/id')
    assert [s['id'] for s in r.json()['content']] == sorted(ids)


def test_paged_listing_rejects_unknown_sort_property_and_bad_bounds(client, make_student):
    make_student()
    assert client.get('/students/all/0/10/password').status_code == 400
    assert client.get('/students/all/-1/10').status_code == 422
    assert client.get('/students/all/0/0').status_code == 422


def test_save_reports_every_violation(client):
    r = client.post('/students/save', json={'firstName': 'A', 'lastName': '', 'age': 17, 'email': 'not-an-email'})
    assert r.status_code == 400
    detail = r.json()['detail']
    assert detail['message'] == 'Validation failed'
    assert {v['field'] for v in detail['violations']} == {'firstName', 'lastName', 'age', 'email'}
    # nothing reached the store
    assert client.get('/students/all').status_code == 404


def test_save_with_unknown_teacher_reference_is_404(client):
    payload = {'firstName': 'Ann', 'lastName': 'Lee', 'age': 20, 'email': 'ann@x.com', 'teachers': [{'id': 42}]}
    r = client.post('/students/save', json=payload)
    assert r.status_code == 404
    assert r.json()['detail'] == 'Teacher not found for id :: 42'
    assert client.get('/students/all').status_code == 404


def test_update_replaces_every_field(client, make_student, make_teacher):
    t1 = make_teacher(firstName='Tom')
    t2 = make_teacher(firstName='Tia')
    sid = make_student(specialization='History', teachers=[{'id': t1}])

    payload = {
        'firstName': 'Anna',
        'lastName': 'Leeds',
        'age': 30,
        'email': 'anna@y.org',
        'specialization': 'Physics',
        'teachers': [{'id': t2}],
    }
    r = client.put(f'/students/{sid}', json=payload)
    assert r.status_code == 200
    assert r.json()['message'] == 'Student was updated'

    student = client.get(f'/students/{sid}').json()
    assert student['firstName'] == 'Anna'
    assert student['lastName'] == 'Leeds'
    assert student['age'] == 30
    assert student['email'] == 'anna@y.org'
    assert student['specialization'] == 'Physics'
    assert [t['id'] for t in student['teachers']] == [t2]


def test_update_without_teachers_clears_the_list(client, make_student, make_teacher):
    tid = make_teacher()
    sid = make_student(teachers=[{'id': tid}])
    r = client.put(f'/students/{sid}', json={'firstName': 'Ann', 'lastName': 'Lee', 'age': 21, 'email': 'ann@x.com'})
    assert r.status_code == 200
    assert client.get(f'/students/{sid}/getTeachers').json() == []


def test_update_with_invalid_payload_is_400(client, make_student):
    sid = make_student()
    r = client.put(f'/students/{sid}', json={'firstName': 'Ann', 'lastName': 'Lee', 'age': 12, 'email': 'ann@x.com'})
    assert r.status_code == 400
    assert client.get(f'/students/{sid}').json()['age'] == 20


def test_teachers_embedded_without_their_students(client, make_student, make_teacher):
    tid = make_teacher()
    sid = make_student(teachers=[{'id': tid}])
    student = client.get(f'/students/{sid}').json()
    assert len(student['teachers']) == 1
    assert student['teachers'][0]['id'] == tid
    assert 'students' not in student['teachers'][0]

    teachers = client.get(f'/students/{sid}/getTeachers').json()
    assert [t['id'] for t in teachers] == [tid]
    assert 'students' not in teachers[0]


def test_request_id_header_is_echoed(client):
    r = client.get('/health', headers={'X-Request-ID': 'abc123'})
    assert r.status_code == 200
    assert r.json() == {'status': 'ok'}
    assert r.headers['X-Request-ID'] == 'abc123'


def test_save_rejects_email_with_trailing_newline(client):
    r = client.post('/students/save', json={'firstName': 'Ann', 'lastName': 'Lee', 'age': 20, 'email': 'ann@x.com\n'})
    assert r.status_code == 400
    assert [v['field'] for v in r.json()['detail']['violations']] == ['email']
    assert client.get('/students/all').status_code == 404


def test_huge_page_number_is_rejected(client, make_student):
    make_student()
    assert client.get('/students/all/9223372036854775807/2000').status_code == 422
    assert client.get('/students/all/9223372036854775807/2000/lastName').status_code == 422
    assert client.get('/teachers/all/9223372036854775807/2000').status_code == 422
    # the largest accepted page still runs and is simply empty
    r = client.get(f'/students/all/{MAX_PAGE_NUMBER}/{settings.MAX_PAGE_SIZE}')
    assert r.status_code == 200
    assert r.json()['content'] == []


def test_sorted_page_defaults_to_id_without_sort_property(session):
    for student_id, last_name in ((3, 'Adams'), (1, 'Young'), (2, 'Moore')):
        session.add(models.Student(id=student_id, first_name='Ann', last_name=last_name, age=20, email='ann@x.com'))
        session.commit()

    assert StudentRepository(session).sort_attribute(None) == 'id'
    page = StudentService(session).list_paged_sorted(0, 10, None)
    assert [s.id for s in page.content] == [1, 2, 3]
    assert page.total_elements == 3
