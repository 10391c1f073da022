from cleanops.models import Address, Client, Company, User, UserRole, db


def test_find_company_admin_prefers_active_owner(company):
    admin = User(email="admin@sparkle.test", role=UserRole.ADMIN, company_id=company.id)
    inactive_owner = User(email="old@sparkle.test", role=UserRole.OWNER, company_id=company.id, is_active=False)
    db.session.add_all([admin, inactive_owner])
    db.session.commit()

    assert User.find_company_admin(company.id) == admin
    assert admin.is_admin is True

    owner = User(email="owner@sparkle.test", role=UserRole.OWNER, company_id=company.id)
    db.session.add(owner)
    db.session.commit()

    assert User.find_company_admin(company.id) == owner


def test_find_company_admin_ignores_other_roles(company, cleaner_user):
    assert cleaner_user.is_admin is False
    assert User.find_company_admin(company.id) is None


def test_company_find_by_id(company):
    assert Company.find_by_id(company.id) == company
    assert Company.find_by_id("missing") is None


def test_address_full_address_skips_blank_parts(company, owner_user):
    client = Client(company_id=company.id, user_id=owner_user.id, name="Quinn")
    db.session.add(client)
    db.session.commit()
    address = Address(client_id=client.id, street="1 Main St", city="Springfield")
    db.session.add(address)
    db.session.commit()

    assert len(client.id) == 32
    assert address.label == "Home"
    assert address.get_full_address() == "1 Main St, Springfield"

    address.state = "IL"
    address.zip = "62701"
    assert address.get_full_address() == "1 Main St, Springfield, IL 62701"
