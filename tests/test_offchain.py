"""Tests for the off-chain accounts and stats module."""

import json

import asyncpg
import pytest

from offchain import (
    InvalidAccountError, AccountConflictError, InvalidStatsError,
    LootboxNotFoundError, StatsConflictError, SlugGenerationError,
    validate_account_input, upsert_account, validate_slug,
    generate_unique_url, create_lootbox_stats, get_lootbox_stats_by_url
)

WALLET = "0x1f2e3d4c5b6a"

""" Account validation """
def test_validate_account_input_normalises_blanks():
    assert validate_account_input(WALLET, "", "", "") == (WALLET, None, None, None)

def test_validate_account_input_parses_preferences():
    _, email, username, preferences = validate_account_input(
        WALLET, "a@b.io", "lucky_777", '{"theme": "dark"}'
    )
    assert email == "a@b.io"
    assert username == "lucky_777"
    assert preferences == {"theme": "dark"}

@pytest.mark.parametrize("wallet,email,username,preferences", [
    ("", None, None, None),
    ("   ", None, None, None),
    (WALLET, "not-an-email", None, None),
    (WALLET, None, "ab", None),
    (WALLET, None, "x" * 31, None),
    (WALLET, None, "bad name!", None),
    (WALLET, None, None, "{not json"),
    (WALLET, None, None, "[1, 2]"),
])
def test_validate_account_input_rejects(wallet, email, username, preferences):
    with pytest.raises(InvalidAccountError):
        validate_account_input(wallet, email, username, preferences)

""" Upsert """
@pytest.mark.asyncio
async def test_upsert_is_single_conflict_statement(conn):
    conn.queue({"walletAddress": WALLET, "email": "a@b.io"})

    result = await upsert_account(conn, WALLET, email="a@b.io")

    assert result == {"account": {"walletAddress": WALLET, "email": "a@b.io"}}
    assert len(conn.calls) == 1
    method, sql, args = conn.calls[0]
    assert method == "fetchrow"
    assert 'ON CONFLICT ("walletAddress") DO UPDATE' in sql
    assert "RETURNING *" in sql
    assert args == (WALLET, "a@b.io", None, None)

@pytest.mark.asyncio
async def test_upsert_twice_last_write_wins(conn):
    """Both calls target the same conflict key, the second email is bound last."""
    conn.queue(
        {"walletAddress": WALLET, "email": "first@b.io"},
        {"walletAddress": WALLET, "email": "second@b.io"}
    )
    await upsert_account(conn, WALLET, email="first@b.io")
    result = await upsert_account(conn, WALLET, email="second@b.io")

    assert result["account"]["email"] == "second@b.io"
    assert [args[0] for _, _, args in conn.calls] == [WALLET, WALLET]
    assert "email = COALESCE($2" in conn.calls[1][1]

@pytest.mark.asyncio
@pytest.mark.parametrize("constraint,code", [
    ("OFFChain_Account_email_key", "EMAIL_TAKEN"),
    ("OFFChain_Account_username_key", "USERNAME_TAKEN"),
])
async def test_upsert_unique_violation_is_conflict(conn, constraint, code):
    error = asyncpg.exceptions.UniqueViolationError("duplicate key value")
    error.constraint_name = constraint
    error.detail = "Key already exists."
    conn.queue(error)

    with pytest.raises(AccountConflictError) as exc_info:
        await upsert_account(conn, WALLET, email="a@b.io", username="lucky_777")

    assert exc_info.value.code == code
    assert exc_info.value.details == "Key already exists."

@pytest.mark.asyncio
async def test_upsert_other_unique_violation_propagates(conn):
    error = asyncpg.exceptions.UniqueViolationError("duplicate key value")
    error.constraint_name = "OFFChain_Account_pkey"
    conn.queue(error)

    with pytest.raises(asyncpg.exceptions.UniqueViolationError):
        await upsert_account(conn, WALLET)

""" Slugs """
@pytest.mark.parametrize("desired", ["genesis", "my-genesis-box", "box-2024", "7"])
def test_validate_slug_keeps_value(desired):
    assert validate_slug(desired) == desired

@pytest.mark.parametrize("desired", [
    "", None, "Genesis", " genesis", "genesis\n", "a--b", "-genesis", "genesis-",
    "my_box", "x" * 101,
])
def test_validate_slug_rejects(desired):
    with pytest.raises(InvalidStatsError):
        validate_slug(desired)

@pytest.mark.asyncio
async def test_unused_slug_is_returned_unchanged(conn):
    conn.queue(False)
    assert await generate_unique_url(conn, "genesis") == "genesis"
    assert len(conn.calls) == 1

@pytest.mark.asyncio
async def test_used_slug_gets_suffix(conn):
    conn.queue(True, True, False)

    slug = await generate_unique_url(conn, "genesis")

    assert slug != "genesis"
    assert slug.startswith("genesis-")
    assert slug.split("-")[-1].isdigit()
    # the returned candidate is the one last checked and found free
    assert conn.calls[-1][2] == (slug,)

@pytest.mark.asyncio
async def test_slug_attempts_are_bounded(conn):
    conn.queue(*([True] * 4))
    with pytest.raises(SlugGenerationError):
        await generate_unique_url(conn, "genesis", max_attempts=3)
    assert len(conn.calls) == 4

""" Stats creation """
@pytest.mark.asyncio
async def test_create_stats_by_id(conn):
    created = {"id": 1, "lootboxId": 5, "url": "genesis", "rarityColors": {"Rare": "#00f"}}
    conn.queue({"id": 5}, None, False, created)

    result = await create_lootbox_stats(conn, "genesis", lootbox_id=5, rarity_colors={"Rare": "#00f"})

    assert result == {"stats": created}
    lookup = conn.calls[0]
    assert lookup[0] == "fetchrow"
    assert 'FROM "Lootbox" l' in lookup[1]
    assert lookup[2] == (5,)
    insert = conn.calls[-1]
    assert "ON CONFLICT DO NOTHING" in insert[1]
    assert insert[2] == (5, "genesis", {"Rare": "#00f"})

@pytest.mark.asyncio
async def test_create_stats_by_creator_and_collection(conn):
    conn.queue({"id": 9}, None, False, {"id": 2, "lootboxId": 9, "url": "genesis"})

    result = await create_lootbox_stats(
        conn, "genesis", creator_address="0xabc", collection_name="Genesis"
    )

    assert result["stats"]["lootboxId"] == 9
    assert conn.calls[0][2] == ("0xabc", "Genesis")
    assert conn.calls[-1][2][0] == 9

@pytest.mark.asyncio
async def test_create_stats_conflict_leaves_row(conn):
    existing = {"id": 1, "lootboxId": 5, "url": "genesis"}
    conn.queue({"id": 5}, existing)

    with pytest.raises(StatsConflictError) as exc_info:
        await create_lootbox_stats(conn, "other", lootbox_id=5)

    assert exc_info.value.existing == existing
    assert not any("INSERT" in sql for sql in conn.statements)

@pytest.mark.asyncio
async def test_create_stats_concurrent_insert_is_conflict(conn):
    conn.queue({"id": 5}, None, False, None)
    with pytest.raises(StatsConflictError):
        await create_lootbox_stats(conn, "genesis", lootbox_id=5)

@pytest.mark.asyncio
async def test_create_stats_unknown_lootbox(conn):
    conn.queue(None)
    with pytest.raises(LootboxNotFoundError):
        await create_lootbox_stats(conn, "genesis", lootbox_id=404)
    assert conn.calls == [("fetchrow", conn.statements[0], (404,))]
    assert "l.id = $1" in conn.statements[0]

@pytest.mark.asyncio
async def test_create_stats_rejects_non_slug_before_queries(conn):
    with pytest.raises(InvalidStatsError):
        await create_lootbox_stats(conn, "My Genesis", lootbox_id=5)
    assert conn.calls == []

@pytest.mark.asyncio
async def test_create_stats_requires_lootbox_reference(conn):
    with pytest.raises(InvalidStatsError):
        await create_lootbox_stats(conn, "genesis", creator_address="0xabc")
    assert conn.calls == []

""" Composed fetch """
@pytest.mark.asyncio
async def test_stats_by_url_without_flags_is_one_query(conn):
    conn.queue({"id": 1, "lootboxId": 5, "url": "genesis"})
    result = await get_lootbox_stats_by_url(conn, "genesis")
    assert result["stats"]["url"] == "genesis"
    assert "lootbox" not in result["stats"]
    assert len(conn.calls) == 1

@pytest.mark.asyncio
async def test_stats_by_url_with_lootbox_and_tokens(conn):
    conn.queue(
        {"id": 1, "lootboxId": 5, "url": "genesis"},
        [{"id": 5, "tokenCollectionId": 3}],
        [{"id": 3, "name": "Genesis", "tokens": [{"tokenName": "Dragon"}]}]
    )

    result = await get_lootbox_stats_by_url(conn, "genesis", include_lootbox=True, include_tokens=True)

    stats = result["stats"]
    assert stats["lootbox"] == {"id": 5, "tokenCollectionId": 3}
    assert stats["tokenCollection"]["tokens"] == [{"tokenName": "Dragon"}]
    assert len(conn.calls) == 3
    assert conn.calls[1][2] == ([5],)
    assert conn.calls[2][2] == ([3],)

@pytest.mark.asyncio
async def test_stats_by_url_unknown(conn):
    result = await get_lootbox_stats_by_url(conn, "missing", include_lootbox=True)
    assert result == {"stats": None}
    assert len(conn.calls) == 1

""" Private routes """
def test_url_exists_on_empty_table(client, conn, auth_headers):
    conn.queue(False)
    response = client.get("/api/private/lootbox-stats-url-exists?url=foo", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"exists": False, "url": "foo"}

def test_upsert_route_validates_before_query(client, pool, auth_headers):
    response = client.get(
        "/api/private/account/upsert?walletAddress=0xabc&username=x",
        headers=auth_headers
    )
    assert response.status_code == 400
    assert "Username" in response.json()["error"]
    assert pool.acquired == 0

def test_upsert_route_missing_wallet(client, pool, auth_headers):
    response = client.get("/api/private/account/upsert?email=a@b.io", headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Wallet address required"}
    assert pool.acquired == 0

def test_upsert_route_conflict_envelope(client, conn, auth_headers):
    error = asyncpg.exceptions.UniqueViolationError("duplicate key value")
    error.constraint_name = "OFFChain_Account_email_key"
    error.detail = "Key (email)=(a@b.io) already exists."
    conn.queue(error)

    response = client.post(
        "/api/private/account/upsert",
        params={"walletAddress": WALLET, "email": "a@b.io"},
        headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json() == {
        "error": "Email already in use",
        "code": "EMAIL_TAKEN",
        "details": "Key (email)=(a@b.io) already exists."
    }

def test_upsert_route_passes_preferences(client, conn, auth_headers):
    conn.queue({"walletAddress": WALLET, "preferences": {"theme": "dark"}})
    response = client.get(
        "/api/private/account/upsert",
        params={"walletAddress": WALLET, "preferences": json.dumps({"theme": "dark"})},
        headers=auth_headers
    )
    assert response.status_code == 200
    assert conn.calls[0][2] == (WALLET, None, None, {"theme": "dark"})

def test_create_route_conflict(client, conn, auth_headers):
    conn.queue({"id": 5}, {"id": 1, "lootboxId": 5, "url": "genesis"})
    response = client.post(
        "/api/private/lootbox-stats/create",
        json={"lootboxId": 5, "url": "genesis"},
        headers=auth_headers
    )
    assert response.status_code == 409
    assert response.json()["stats"]["url"] == "genesis"

def test_create_route_created(client, conn, auth_headers):
    conn.queue({"id": 5}, None, False, {"id": 1, "lootboxId": 5, "url": "genesis"})
    response = client.post(
        "/api/private/lootbox-stats/create",
        json={"lootboxId": 5, "url": "genesis", "rarityColors": {"Rare": "#00f"}},
        headers=auth_headers
    )
    assert response.status_code == 201
    assert response.json() == {"stats": {"id": 1, "lootboxId": 5, "url": "genesis"}}

def test_create_route_unknown_lootbox(client, conn, auth_headers):
    conn.queue(None)
    response = client.post(
        "/api/private/lootbox-stats/create",
        json={"creatorAddress": "0xabc", "collectionName": "Nope", "url": "nope"},
        headers=auth_headers
    )
    assert response.status_code == 404

def test_create_route_missing_url(client, pool, auth_headers):
    response = client.post(
        "/api/private/lootbox-stats/create",
        json={"lootboxId": 5},
        headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json() == {"error": "URL required"}
    assert pool.acquired == 0

def test_create_route_malformed_body(client, pool, auth_headers):
    response = client.post(
        "/api/private/lootbox-stats/create",
        json={"lootboxId": "five", "url": "genesis"},
        headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request")
    assert pool.acquired == 0

def test_all_stats_flags(client, conn, auth_headers):
    client.get(
        "/api/private/all-lootbox-stats?mustHaveUrl=true&isActive=true&isWhitelisted=false",
        headers=auth_headers
    )
    sql = conn.statements[0]
    assert "s.url IS NOT NULL" in sql
    assert 'l."isActive" = true' in sql
    assert "isWhitelisted" not in sql

@pytest.mark.parametrize("path", [
    "/api/private/account",
    "/api/private/lootbox-stats",
    "/api/private/lootbox-likes",
    "/api/private/lootbox-views",
    "/api/private/creator-lootbox-stats",
    "/api/private/lootbox-stats-by-url",
    "/api/private/lootbox-stats-url-exists",
    "/api/private/lootbox-stats-by-collection?creator=0xabc",
])
def test_private_required_parameters(client, pool, auth_headers, path):
    response = client.get(path, headers=auth_headers)
    assert response.status_code == 400
    assert "required" in response.json()["error"]
    assert pool.acquired == 0

@pytest.mark.asyncio
async def test_attach_relations_batches_lookups(conn):
    from offchain import attach_relations

    stats = [
        {"id": 1, "lootboxId": 5},
        {"id": 2, "lootboxId": 6},
        {"id": 3, "lootboxId": 7},
    ]
    conn.queue(
        [{"id": 5, "tokenCollectionId": 3}, {"id": 6, "tokenCollectionId": None}],
        [{"id": 3, "name": "Genesis"}]
    )

    await attach_relations(conn, stats, include_lootbox=True, include_token_collection=True)

    assert len(conn.calls) == 2
    assert "tokens" not in conn.calls[1][1].split("FROM")[0]
    assert stats[0]["tokenCollection"] == {"id": 3, "name": "Genesis"}
    assert stats[1]["lootbox"]["id"] == 6
    assert stats[1]["tokenCollection"] is None
    assert stats[2]["lootbox"] is None
    assert stats[2]["tokenCollection"] is None

@pytest.mark.asyncio
async def test_attach_relations_without_flags_is_free(conn):
    from offchain import attach_relations

    stats = [{"id": 1, "lootboxId": 5}]
    assert await attach_relations(conn, stats) == [{"id": 1, "lootboxId": 5}]
    assert conn.calls == []

""" Stored URLs """
def test_created_url_is_the_checked_url(client, conn, auth_headers):
    """A URL reported free is stored and found again exactly as submitted."""
    conn.queue(False)
    checked = client.get(
        "/api/private/lootbox-stats-url-exists?url=genesis-box", headers=auth_headers
    )
    assert checked.json() == {"exists": False, "url": "genesis-box"}

    conn.queue({"id": 5}, None, False, {"id": 1, "lootboxId": 5, "url": "genesis-box"})
    created = client.post(
        "/api/private/lootbox-stats/create",
        json={"lootboxId": 5, "url": "genesis-box"},
        headers=auth_headers
    )
    assert created.status_code == 201

    conn.queue({"id": 1, "lootboxId": 5, "url": "genesis-box"})
    found = client.get(
        "/api/private/lootbox-stats-by-url?url=genesis-box", headers=auth_headers
    )
    assert found.json()["stats"]["url"] == "genesis-box"

    url_exists_check, _, _, create_check, insert, by_url = conn.calls
    assert url_exists_check[2] == ("genesis-box",)
    assert create_check[2] == url_exists_check[2]
    assert insert[2][1] == "genesis-box"
    assert by_url[2] == ("genesis-box",)

def test_create_route_rejects_non_slug_url(client, conn, auth_headers):
    response = client.post(
        "/api/private/lootbox-stats/create",
        json={"lootboxId": 5, "url": "Genesis"},
        headers=auth_headers
    )
    assert response.status_code == 400
    assert "lowercase" in response.json()["error"]
    assert conn.calls == []

""" Stats reads """
def test_lootbox_stats_carries_counts(client, conn, auth_headers):
    row = {"id": 1, "lootboxId": 5, "url": "genesis", "likeCount": 3, "viewCount": 10}
    conn.queue(row)

    response = client.get("/api/private/lootbox-stats?lootboxId=5", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"stats": row}
    method, sql, args = conn.calls[0]
    assert method == "fetchrow"
    assert '"likeCount"' in sql and '"viewCount"' in sql
    assert args == (5,)

def test_lootbox_stats_absent_is_null(client, conn, auth_headers):
    response = client.get("/api/private/lootbox-stats?lootboxId=5", headers=auth_headers)
    assert response.json() == {"stats": None}

@pytest.mark.parametrize("path,key,table", [
    ("/api/private/lootbox-likes", "likes", "OFFChain_LootboxLike"),
    ("/api/private/lootbox-views", "views", "OFFChain_LootboxView"),
])
def test_interactions_shape(client, conn, auth_headers, path, key, table):
    rows = [{"id": 2, "walletAddress": "0xabc"}, {"id": 1, "walletAddress": "0xdef"}]
    conn.queue(rows)

    response = client.get(f"{path}?lootboxId=5", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {key: rows, "count": 2}
    assert f'"{table}"' in conn.statements[0]
    assert conn.calls[0][2] == (5,)

def test_creator_stats_with_lootboxes_and_tokens(client, conn, auth_headers):
    conn.queue(
        [{"id": 1, "lootboxId": 5}, {"id": 2, "lootboxId": 6}],
        [{"id": 5, "tokenCollectionId": 3}, {"id": 6, "tokenCollectionId": 3}],
        [{"id": 3, "name": "Genesis", "tokens": [{"tokenName": "Dragon"}]}]
    )

    response = client.get(
        "/api/private/creator-lootbox-stats?creator=0xabc&includeLootboxes=true&includeTokens=true",
        headers=auth_headers
    )

    stats = response.json()["stats"]
    assert [s["lootbox"]["id"] for s in stats] == [5, 6]
    assert all(s["tokenCollection"]["tokens"] == [{"tokenName": "Dragon"}] for s in stats)
    assert len(conn.calls) == 3
    assert conn.calls[0][2] == ("0xabc",)
    assert conn.calls[1][2] == ([5, 6],)
    assert conn.calls[2][2] == ([3],)
    assert "jsonb_agg" in conn.statements[2]

def test_creator_stats_without_flags(client, conn, auth_headers):
    conn.queue([{"id": 1, "lootboxId": 5}])
    response = client.get("/api/private/creator-lootbox-stats?creator=0xabc", headers=auth_headers)
    assert response.json() == {"stats": [{"id": 1, "lootboxId": 5}]}
    assert len(conn.calls) == 1

def test_stats_by_collection_found(client, conn, auth_headers):
    conn.queue(
        {"id": 1, "lootboxId": 5, "url": "genesis"},
        [{"id": 5, "tokenCollectionId": None}]
    )

    response = client.get(
        "/api/private/lootbox-stats-by-collection?creator=0xabc&collection=Genesis&includeLootbox=true",
        headers=auth_headers
    )

    stats = response.json()["stats"]
    assert stats["url"] == "genesis"
    assert stats["lootbox"] == {"id": 5, "tokenCollectionId": None}
    assert "tokenCollection" not in stats
    assert conn.calls[0][2] == ("0xabc", "Genesis")
    assert len(conn.calls) == 2

@pytest.mark.parametrize("flag_name,with_tokens", [
    ("includeTokenCollection", False),
    ("includeTokens", True),
])
def test_all_stats_attach_collection(client, conn, auth_headers, flag_name, with_tokens):
    conn.queue(
        [{"id": 1, "lootboxId": 5}],
        [{"id": 5, "tokenCollectionId": 3}],
        [{"id": 3, "name": "Genesis"}]
    )

    response = client.get(f"/api/private/all-lootbox-stats?{flag_name}=true", headers=auth_headers)

    stats = response.json()["stats"]
    assert stats == [{"id": 1, "lootboxId": 5, "tokenCollection": {"id": 3, "name": "Genesis"}}]
    assert "s.url IS NOT NULL" not in conn.statements[0]
    assert ("jsonb_agg" in conn.statements[2]) is with_tokens
