from __future__ import annotations

from flask import Flask, g, jsonify, session

from ..common.http import Guards, current_identity, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.access_control)

    # ---- authentication -------------------------------------------------

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        identity, user = container.auth_service.authenticate(
            str(data.get("identifier") or data.get("email") or data.get("mobile") or ""),
            str(data.get("password") or ""),
            str(data.get("role") or ""),
        )

        session.clear()
        session.permanent = True
        session["user_id"] = identity.user_id
        session["role"] = identity.role.value
        return jsonify({"user": user})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    def me():
        return jsonify({"user": container.auth_service.whoami(current_identity())})

    # ---- admins (admin only) --------------------------------------------

    @app.route("/api/admins", methods=["GET"], endpoint="admins_list")
    @guards.admin_required
    def admins_list():
        return jsonify([a.to_public() for a in container.admin_service.list_all()])

    @app.route("/api/admins/<int:admin_id>", methods=["GET"], endpoint="admins_get")
    @guards.admin_required
    def admins_get(admin_id: int):
        return jsonify(container.admin_service.get(admin_id).to_public())

    @app.route("/api/admins", methods=["POST"], endpoint="admins_create")
    @guards.admin_required
    def admins_create():
        data = json_body()
        admin = container.admin_service.create(
            name=data.get("name"),
            email=data.get("email"),
            mobile=data.get("mobile"),
            password=data.get("password"),
        )
        return jsonify(admin.to_public()), 201

    @app.route("/api/admins/<int:admin_id>", methods=["PATCH"], endpoint="admins_update")
    @guards.admin_required
    def admins_update(admin_id: int):
        return jsonify(container.admin_service.update(admin_id, json_body()).to_public())

    @app.route("/api/admins/<int:admin_id>", methods=["DELETE"], endpoint="admins_delete")
    @guards.admin_required
    def admins_delete(admin_id: int):
        container.admin_service.delete(current=g.identity, admin_id=admin_id)
        return jsonify({"success": True})

    # ---- teachers -------------------------------------------------------

    @app.route("/api/teachers", methods=["GET"], endpoint="teachers_list")
    @guards.login_required
    def teachers_list():
        return jsonify([t.to_public() for t in container.teacher_service.list_all()])

    @app.route("/api/teachers/<int:teacher_id>", methods=["GET"], endpoint="teachers_get")
    @guards.login_required
    def teachers_get(teacher_id: int):
        return jsonify(container.teacher_service.get(teacher_id).to_public())

    @app.route("/api/teachers", methods=["POST"], endpoint="teachers_create")
    @guards.admin_required
    def teachers_create():
        data = json_body()
        teacher = container.teacher_service.create(
            name=data.get("name"),
            email=data.get("email"),
            mobile=data.get("mobile"),
            password=data.get("password"),
            dept_id=data.get("departmentId"),
        )
        return jsonify(teacher.to_public()), 201

    @app.route("/api/teachers/<int:teacher_id>", methods=["PATCH"], endpoint="teachers_update")
    @guards.login_required
    def teachers_update(teacher_id: int):
        teacher = container.teacher_service.update(current=g.identity, teacher_id=teacher_id, data=json_body())
        return jsonify(teacher.to_public())

    @app.route("/api/teachers/<int:teacher_id>", methods=["DELETE"], endpoint="teachers_delete")
    @guards.admin_required
    def teachers_delete(teacher_id: int):
        container.teacher_service.delete(teacher_id=teacher_id)
        return jsonify({"success": True})

    # ---- departments ----------------------------------------------------

    @app.route("/api/departments", methods=["GET"], endpoint="departments_list")
    @guards.login_required
    def departments_list():
        return jsonify([d.to_public() for d in container.department_service.list_all()])

    @app.route("/api/departments/<int:dept_id>", methods=["GET"], endpoint="departments_get")
    @guards.login_required
    def departments_get(dept_id: int):
        return jsonify(container.department_service.get(dept_id).to_public())

    @app.route("/api/departments", methods=["POST"], endpoint="departments_create")
    @guards.admin_required
    def departments_create():
        dept = container.department_service.create(name=json_body().get("name"))
        return jsonify(dept.to_public()), 201

    @app.route("/api/departments/<int:dept_id>", methods=["PATCH"], endpoint="departments_update")
    @guards.admin_required
    def departments_update(dept_id: int):
        dept = container.department_service.update(dept_id, name=json_body().get("name"))
        return jsonify(dept.to_public())

    @app.route("/api/departments/<int:dept_id>", methods=["DELETE"], endpoint="departments_delete")
    @guards.admin_required
    def departments_delete(dept_id: int):
        container.department_service.delete(dept_id)
        return jsonify({"success": True})
